"""
Riskmap Cards - REST API

FastAPI application for crowdsourced disaster report cards:
card creation, report submission and image uploads.

Run with: uvicorn src.api.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.core.config import settings
from src.core.logging import setup_logging
from src.api import cards
from src.cards.errors import CardError, CardValidationError
from src.cards.validation import format_errors
from src.database.connection import get_db

VERSION = "0.1.0"

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.db_auto_create:
        get_db().create_tables()
    yield


app = FastAPI(
    title="Riskmap Cards",
    description="Crowdsourced disaster report cards: creation, report intake and image uploads",
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Error Handlers
# ============================================================================

@app.exception_handler(CardError)
async def card_error_handler(request: Request, exc: CardError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc!r}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    error = CardValidationError(
        format_errors(exc.errors()),
        card_id=request.path_params.get("card_id"),
    )
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# ============================================================================
# System Routes
# ============================================================================

class HealthResponse(BaseModel):
    """API health check response."""
    status: str
    version: str
    timestamp: str


@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """Check API health status."""
    return HealthResponse(
        status="healthy",
        version=VERSION,
        timestamp=datetime.utcnow().isoformat(),
    )


app.include_router(cards.router)

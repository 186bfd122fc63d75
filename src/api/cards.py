"""
/cards routes

Handlers are plain ``def`` functions so FastAPI runs the blocking
database calls in its threadpool.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Path, Query, Response
from fastapi.responses import JSONResponse

from src.api.dependencies import get_card_service
from src.cards.ids import CARD_ID_MAX_LENGTH, CARD_ID_MIN_LENGTH
from src.cards.service import CardService
from src.cards.uploads import DEFAULT_FILE_TYPE
from src.cards.validation import CardCreateRequest, ImagePatch, validate_report

router = APIRouter(prefix="/cards", tags=["Cards"])

CardId = Annotated[str, Path(min_length=CARD_ID_MIN_LENGTH, max_length=CARD_ID_MAX_LENGTH)]


@router.post("")
def create_card(
    request: CardCreateRequest,
    service: CardService = Depends(get_card_service),
):
    """Create an unclaimed card and return its id."""
    card = service.create_card(request)
    return {"cardId": card.card_id, "created": True}


@router.head("/{card_id}")
def card_exists(
    card_id: str,
    service: CardService = Depends(get_card_service),
):
    """Check for the existence of a card."""
    status_code = 200 if service.card_exists(card_id) else 404
    return Response(status_code=status_code)


@router.get("/{card_id}")
def get_card(
    card_id: CardId,
    service: CardService = Depends(get_card_service),
):
    """Return a card."""
    card = service.get_card(card_id)
    if card is None:
        return JSONResponse(
            status_code=404,
            content={"statusCode": 404, "found": False, "result": None},
        )
    return {"statusCode": 200, "result": card}


@router.put("/{card_id}")
def submit_report(
    card_id: CardId,
    payload: Any = Body(...),
    service: CardService = Depends(get_card_service),
):
    """
    Attach a report to a card.

    The payload is validated before the card is looked at, so a malformed
    report gets a 400 even for unknown or already received cards.
    """
    report = validate_report(payload, card_id=card_id)
    service.submit_report(card_id, report)
    return {"statusCode": 200, "cardId": card_id, "created": True}


@router.get("/{card_id}/images")
def request_upload_slot(
    card_id: CardId,
    file_type: str = Query(DEFAULT_FILE_TYPE),
    service: CardService = Depends(get_card_service),
):
    """Give a signed S3 url for the client to upload the card image to."""
    slot = service.request_upload_slot(card_id, file_type)
    return slot.to_dict()


@router.patch("/{card_id}")
def confirm_image(
    patch: ImagePatch,
    card_id: CardId,
    service: CardService = Depends(get_card_service),
):
    """Record the uploaded image url on the card."""
    service.confirm_image(card_id, patch.image_url)
    return {"statusCode": 200, "cardId": card_id, "updated": True}

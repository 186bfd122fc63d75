"""
Database connection management for Riskmap Cards
Supports PostgreSQL in production and SQLite for local runs and tests
"""

import os
import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError

from src.core.config import settings
from .models import Base

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """
    Database connection manager with connection pooling.

    Every statement is bounded by ``timeout_ms``: PostgreSQL gets a
    server-side ``statement_timeout``, SQLite a busy timeout.
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        pool_size: Optional[int] = None,
        max_overflow: Optional[int] = None,
        timeout_ms: Optional[int] = None
    ):
        """
        Initialize database connection.

        Args:
            database_url: Database connection URL
            pool_size: Connection pool size
            max_overflow: Max connections beyond pool_size
            timeout_ms: Per-statement timeout in milliseconds
        """
        self.database_url = database_url or settings.database_url
        self.timeout_ms = timeout_ms or settings.db_timeout_ms

        engine_kwargs = {
            "echo": os.getenv("DB_ECHO", "false").lower() == "true",
        }

        if self.database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {
                "check_same_thread": False,
                "timeout": self.timeout_ms / 1000,
            }
        else:
            engine_kwargs.update(
                pool_size=pool_size or settings.db_pool_size,
                max_overflow=max_overflow or settings.db_max_overflow,
                pool_timeout=self.timeout_ms / 1000,
                pool_pre_ping=True,
                connect_args={"options": f"-c statement_timeout={self.timeout_ms}"},
            )

        self.engine = create_engine(self.database_url, **engine_kwargs)

        # Session factory
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine
        )

        logger.info(f"Database connection initialized: {self._mask_url(self.database_url)}")

    def _mask_url(self, url: str) -> str:
        """Mask password in connection URL for logging."""
        if "@" in url and ":" in url:
            parts = url.split("@")
            credentials = parts[0].split(":")
            if len(credentials) >= 3:
                credentials[-1] = "****"
            return ":".join(credentials) + "@" + parts[1]
        return url

    def create_tables(self) -> None:
        """Create all database tables."""
        try:
            Base.metadata.create_all(bind=self.engine)
            logger.info("Database tables created successfully")
        except SQLAlchemyError as e:
            logger.error(f"Failed to create tables: {e}")
            raise

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """
        Context manager for database sessions.

        Yields:
            SQLAlchemy session
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Database session error: {e}")
            raise
        finally:
            session.close()

    def close(self) -> None:
        """Close database connection and dispose engine."""
        self.engine.dispose()
        logger.info("Database connection closed")


# Global database instance
_db: Optional[DatabaseConnection] = None


def get_db() -> DatabaseConnection:
    """
    Get global database connection instance.

    Returns:
        DatabaseConnection instance
    """
    global _db
    if _db is None:
        _db = DatabaseConnection()
    return _db


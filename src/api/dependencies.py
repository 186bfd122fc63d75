"""
FastAPI dependencies for the card service.

The service is built once per process from settings. Tests replace it
through ``app.dependency_overrides[get_card_service]``.
"""

from typing import Optional

from src.core.config import settings
from src.database.connection import get_db
from src.cards.cache import ResponseCache
from src.cards.service import CardService
from src.cards.store import CardStore
from src.cards.uploads import UploadCoordinator

_card_service: Optional[CardService] = None


def build_card_service() -> CardService:
    store = CardStore(get_db())
    return CardService(
        store=store,
        uploads=UploadCoordinator(store),
        cache=ResponseCache(
            ttl_seconds=settings.cache_duration_cards_seconds,
            enabled=settings.cache,
        ),
    )


def get_card_service() -> CardService:
    global _card_service
    if _card_service is None:
        _card_service = build_card_service()
    return _card_service

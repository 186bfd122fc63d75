"""
Riskmap Cards - Card Lifecycle Module
Creation, report intake, image uploads and read caching for cards.
"""

from src.cards.cache import CARDS_CACHE_GROUP, ResponseCache
from src.cards.errors import (
    CardError,
    CardValidationError,
    ConflictError,
    DuplicateCardIdError,
    NotFoundError,
    ObjectStoreError,
    StorageError,
)
from src.cards.ids import generate_card_id
from src.cards.service import CardService
from src.cards.store import Card, CardStore, ImageStatus
from src.cards.uploads import UploadCoordinator, UploadSlot
from src.cards.validation import (
    CardCreateRequest,
    ImagePatch,
    ReportSubmission,
    validate_report,
)

__all__ = [
    # Cache
    "CARDS_CACHE_GROUP",
    "ResponseCache",
    # Errors
    "CardError",
    "CardValidationError",
    "ConflictError",
    "DuplicateCardIdError",
    "NotFoundError",
    "ObjectStoreError",
    "StorageError",
    # Store
    "Card",
    "CardStore",
    "ImageStatus",
    # Service
    "CardService",
    "generate_card_id",
    "UploadCoordinator",
    "UploadSlot",
    # Validation
    "CardCreateRequest",
    "ImagePatch",
    "ReportSubmission",
    "validate_report",
]

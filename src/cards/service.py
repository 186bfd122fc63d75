"""
Card lifecycle orchestration
Sequences id generation, storage, uploads and cache purges per operation
"""

import logging
from typing import Callable, Dict, Optional

from src.core.config import Settings, settings as default_settings
from src.cards.cache import CARDS_CACHE_GROUP, ResponseCache
from src.cards.errors import ConflictError, DuplicateCardIdError, NotFoundError, StorageError
from src.cards.ids import generate_card_id
from src.cards.store import Card, CardStore
from src.cards.uploads import DEFAULT_FILE_TYPE, UploadCoordinator, UploadSlot
from src.cards.validation import CardCreateRequest, ReportSubmission

logger = logging.getLogger(__name__)


class CardService:
    """
    Entry point for every card operation.

    Mutations purge the card cache group only after the store reports
    that the write applied.
    """

    def __init__(
        self,
        store: CardStore,
        uploads: UploadCoordinator,
        cache: ResponseCache,
        id_generator: Callable[[], str] = generate_card_id,
        config: Optional[Settings] = None
    ):
        self.store = store
        self.uploads = uploads
        self.cache = cache
        self.id_generator = id_generator
        self.config = config or default_settings

    def create_card(self, request: CardCreateRequest) -> Card:
        """
        Create an unclaimed card under a fresh id.

        A colliding id is redrawn up to ``card_id_max_attempts`` times.
        """
        attempts = self.config.card_id_max_attempts
        for attempt in range(1, attempts + 1):
            card_id = self.id_generator()
            try:
                return self.store.create(
                    card_id,
                    username=request.username,
                    network=request.network,
                    language=request.language,
                )
            except DuplicateCardIdError:
                logger.warning(f"Card id {card_id} taken (attempt {attempt}/{attempts})")

        logger.error(f"Failed to create card after {attempts} attempts")
        raise StorageError("Failed to create card")

    def get_card(self, card_id: str) -> Optional[Dict]:
        """Read-through lookup returning the card as a dict, or None."""
        cached = self.cache.get(card_id)
        if cached is not None:
            return cached

        card = self.store.by_id(card_id)
        if card is None:
            return None

        data = card.to_dict()
        self.cache.set(card_id, data, group=CARDS_CACHE_GROUP)
        return data

    def card_exists(self, card_id: str) -> bool:
        return self.get_card(card_id) is not None

    def submit_report(self, card_id: str, report: ReportSubmission) -> None:
        """
        Attach a report to an unclaimed card.

        Raises:
            NotFoundError: card does not exist
            ConflictError: card already has a report
        """
        if not self.store.submit_report(card_id, report):
            if self.store.by_id(card_id) is None:
                raise NotFoundError(card_id)
            logger.info(f"Rejected duplicate report for card {card_id}")
            raise ConflictError(card_id)

        self.cache.clear(CARDS_CACHE_GROUP)

    def request_upload_slot(self, card_id: str, file_type: str = DEFAULT_FILE_TYPE) -> UploadSlot:
        slot = self.uploads.request_upload_slot(card_id, file_type)
        self.cache.clear(CARDS_CACHE_GROUP)
        return slot

    def confirm_image(self, card_id: str, image_url: str) -> None:
        self.uploads.confirm_image(card_id, image_url)
        self.cache.clear(CARDS_CACHE_GROUP)

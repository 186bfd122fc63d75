"""
Card persistence
Reads and writes card rows through SQLAlchemy
"""

import logging
from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.database.connection import DatabaseConnection
from src.database.models import CardRecord
from src.cards.errors import DuplicateCardIdError, StorageError
from src.cards.validation import ReportSubmission

logger = logging.getLogger(__name__)


class ImageStatus(str, Enum):
    """Confidence in a card's image_url."""
    NONE = "none"
    PENDING = "pending"
    CONFIRMED = "confirmed"


@dataclass
class Card:
    """
    Detached copy of a card row.

    The database row stays the only source of truth; a Card is never
    written back.
    """
    card_id: str
    username: str
    network: str
    language: str
    received: bool = False
    received_at: Optional[datetime] = None
    disaster_type: Optional[str] = None
    report_type: Optional[str] = None
    card_data: Optional[Dict[str, Any]] = None
    flood_depth: Optional[int] = None
    text: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    created_at: Optional[datetime] = None
    image_url: Optional[str] = None
    image_status: ImageStatus = ImageStatus.NONE
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: CardRecord) -> "Card":
        return cls(
            card_id=record.card_id,
            username=record.username,
            network=record.network,
            language=record.language,
            received=bool(record.received),
            received_at=record.received_at,
            disaster_type=record.disaster_type,
            report_type=record.report_type,
            card_data=record.card_data,
            flood_depth=record.flood_depth,
            text=record.text,
            lat=record.lat,
            lng=record.lng,
            created_at=record.created_at,
            image_url=record.image_url,
            image_status=ImageStatus(record.image_status or ImageStatus.NONE.value),
            updated_at=record.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary."""
        data = asdict(self)
        data["image_status"] = self.image_status.value
        for key in ("received_at", "created_at", "updated_at"):
            value = data[key]
            data[key] = value.isoformat() if value else None
        data["location"] = (
            {"lat": self.lat, "lng": self.lng} if self.lat is not None else None
        )
        del data["lat"]
        del data["lng"]
        return data


class CardStore:
    """
    Card table access.

    Report submission is a single conditional UPDATE guarded on
    ``received = false``; whether it applied is read from the row count,
    never from a prior SELECT.
    """

    IMAGE_FIELDS = frozenset({"image_url", "image_status"})

    def __init__(self, db: DatabaseConnection):
        self.db = db

    def create(self, card_id: str, username: str, network: str, language: str) -> Card:
        """
        Insert an unclaimed card.

        Raises:
            DuplicateCardIdError: card_id already taken
            StorageError: any other database failure
        """
        record = CardRecord(
            card_id=card_id,
            username=username,
            network=network,
            language=language,
            received=False,
            image_status=ImageStatus.NONE.value,
            updated_at=datetime.utcnow(),
        )
        try:
            with self.db.get_session() as session:
                session.add(record)
                session.flush()
                card = Card.from_record(record)
        except IntegrityError as e:
            logger.warning(f"Card id collision on create: {card_id}")
            raise DuplicateCardIdError(card_id=card_id) from e
        except SQLAlchemyError as e:
            logger.error(f"Card create failed for {card_id}: {e}")
            raise StorageError(card_id=card_id) from e

        logger.info(f"Card created: {card_id}")
        return card

    def by_id(self, card_id: str) -> Optional[Card]:
        """Return the card or None when it does not exist."""
        try:
            with self.db.get_session() as session:
                record = session.execute(
                    select(CardRecord).where(CardRecord.card_id == card_id)
                ).scalar_one_or_none()
                return Card.from_record(record) if record else None
        except SQLAlchemyError as e:
            logger.error(f"Card lookup failed for {card_id}: {e}")
            raise StorageError(card_id=card_id) from e

    def submit_report(self, card_id: str, report: ReportSubmission) -> bool:
        """
        Write the report and mark the card received.

        Args:
            card_id: Target card
            report: Validated report payload

        Returns:
            True if this call moved the card to received, False if the card
            is missing or was already received
        """
        now = datetime.utcnow()
        stmt = (
            update(CardRecord)
            .where(CardRecord.card_id == card_id)
            .where(CardRecord.received.is_(False))
            .values(
                received=True,
                received_at=now,
                disaster_type=report.disaster_type,
                report_type=report.card_data.report_type,
                card_data=report.card_data.model_dump(exclude_none=True),
                flood_depth=report.flood_depth,
                text=report.text,
                lat=report.location.lat,
                lng=report.location.lng,
                created_at=report.created_at,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        # image_url in the report body is only written when present
        if report.image_url:
            stmt = stmt.values(
                image_url=report.image_url,
                image_status=ImageStatus.PENDING.value,
            )

        try:
            with self.db.get_session() as session:
                applied = session.execute(stmt).rowcount == 1
        except SQLAlchemyError as e:
            logger.error(f"Report submission failed for {card_id}, outcome unknown: {e}")
            raise StorageError(card_id=card_id) from e

        if applied:
            logger.info(f"Report received for card {card_id}")
        return applied

    def update_report(self, card_id: str, **fields: Any) -> bool:
        """
        Unconditionally update image fields of a card.

        Returns:
            True if the card exists
        """
        unknown = set(fields) - self.IMAGE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update card fields: {', '.join(sorted(unknown))}")

        values = {
            key: value.value if isinstance(value, ImageStatus) else value
            for key, value in fields.items()
        }
        values["updated_at"] = datetime.utcnow()

        stmt = (
            update(CardRecord)
            .where(CardRecord.card_id == card_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            with self.db.get_session() as session:
                updated = session.execute(stmt).rowcount == 1
        except SQLAlchemyError as e:
            logger.error(f"Card update failed for {card_id}: {e}")
            raise StorageError(card_id=card_id) from e

        if updated:
            logger.info(f"Card {card_id} updated: {', '.join(sorted(fields))}")
        return updated

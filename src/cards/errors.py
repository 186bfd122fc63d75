"""
Card lifecycle errors

Each error knows its HTTP status and renders the shared JSON envelope
``{statusCode, cardId, message}``.
"""

from typing import Any, Dict, List, Optional


class CardError(Exception):
    """Base class for card lifecycle failures."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, card_id: Optional[str] = None):
        self.message = message or self.default_message
        self.card_id = card_id
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"statusCode": self.status_code, "message": self.message}
        if self.card_id is not None:
            body["cardId"] = self.card_id
        return body


class CardValidationError(CardError):
    """Payload failed the structural or conditional schema."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(
        self,
        errors: List[Dict[str, str]],
        card_id: Optional[str] = None
    ):
        self.errors = errors
        fields = ", ".join(e["field"] for e in errors)
        super().__init__(f"Invalid fields: {fields}", card_id=card_id)

    @property
    def fields(self) -> List[str]:
        return [e["field"] for e in self.errors]

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body["errors"] = self.errors
        return body


class NotFoundError(CardError):
    status_code = 404

    def __init__(self, card_id: str):
        super().__init__(f"No card exists with id '{card_id}'", card_id=card_id)


class ConflictError(CardError):
    status_code = 409

    def __init__(self, card_id: str):
        super().__init__(f"Report already received for card '{card_id}'", card_id=card_id)


class StorageError(CardError):
    """Database failure or timeout. The outcome of the write is unknown."""

    status_code = 500
    default_message = "Internal server error"


class DuplicateCardIdError(StorageError):
    """Generated card id collided with an existing card."""


class ObjectStoreError(CardError):
    status_code = 502
    default_message = "Image storage unavailable"

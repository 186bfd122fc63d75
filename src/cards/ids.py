"""Opaque card id generation."""

import secrets

CARD_ID_MIN_LENGTH = 7
CARD_ID_MAX_LENGTH = 14

# 7 random bytes encode to 10 URL-safe characters
_CARD_ID_BYTES = 7


def generate_card_id() -> str:
    """Return a fresh URL-safe card id. Uniqueness is left to the store."""
    return secrets.token_urlsafe(_CARD_ID_BYTES)

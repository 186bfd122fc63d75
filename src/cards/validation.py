"""
Request validation for card endpoints

Pydantic models for the card bodies plus the report gate, which also
enforces the flood depth rule that depends on ``disaster_type``.
"""

import re
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from src.core.config import settings
from src.cards.errors import CardValidationError

FLOOD = "flood"
FLOOD_DEPTH_MIN = 0
FLOOD_DEPTH_MAX = 200

_LOCATION_PREFIXES = ("body", "path", "query")

# Calendar date, optionally followed by a time and a UTC offset
_ISO_8601 = re.compile(
    r"\d{4}-\d{2}-\d{2}"
    r"(?:[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d{3}(?:\d{3})?)?)?(?:Z|[+-]\d{2}:\d{2})?)?"
)


def _one_of(value: str, allowed: List[str]) -> str:
    if value not in allowed:
        raise ValueError(f"must be one of: {', '.join(allowed)}")
    return value


class CardCreateRequest(BaseModel):
    """Body of POST /cards."""
    model_config = ConfigDict(extra="forbid")

    username: str = Field(..., min_length=1)
    network: str = Field(..., min_length=1)
    language: str

    @field_validator("language")
    @classmethod
    def _known_language(cls, value: str) -> str:
        return _one_of(value, settings.language_list)


class Location(BaseModel):
    model_config = ConfigDict(extra="forbid")

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class CardData(BaseModel):
    model_config = ConfigDict(extra="forbid")

    report_type: str
    flood_depth: Optional[float] = None

    @field_validator("report_type")
    @classmethod
    def _known_report_type(cls, value: str) -> str:
        return _one_of(value, settings.report_type_list)


class ReportSubmission(BaseModel):
    """
    Body of PUT /cards/{card_id}.

    Build it through ``validate_report`` so the conditional flood depth
    rule is applied alongside the field rules.
    """
    model_config = ConfigDict(extra="forbid")

    disaster_type: str
    card_data: CardData
    text: Optional[str] = None
    image_url: Optional[str] = None
    created_at: datetime
    location: Location

    @field_validator("disaster_type")
    @classmethod
    def _known_disaster_type(cls, value: str) -> str:
        return _one_of(value, settings.disaster_type_list)

    @field_validator("text", mode="before")
    @classmethod
    def _text_not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("must be a string")
        return value

    @field_validator("created_at", mode="before")
    @classmethod
    def _iso_timestamp(cls, value: Any) -> datetime:
        if not isinstance(value, str) or not _ISO_8601.fullmatch(value):
            raise ValueError("must be an ISO 8601 date string")
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            raise ValueError("must be an ISO 8601 date string") from None

    @property
    def flood_depth(self) -> Optional[int]:
        if self.disaster_type != FLOOD or self.card_data.flood_depth is None:
            return None
        return int(self.card_data.flood_depth)


class ImagePatch(BaseModel):
    """Body of PATCH /cards/{card_id}."""
    model_config = ConfigDict(extra="forbid")

    image_url: str = Field(..., min_length=1)


def format_errors(errors: Iterable[Dict[str, Any]]) -> List[Dict[str, str]]:
    """
    Flatten pydantic error dicts into ``{field, message}`` pairs.

    Request location prefixes added by FastAPI (body, path, query) are
    dropped so that fields read the same as in the JSON payload.
    """
    formatted = []
    seen = set()
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        field = ".".join(loc) or "body"
        if field in seen:
            continue
        seen.add(field)
        formatted.append({"field": field, "message": error.get("msg", "invalid")})
    return formatted


def _flood_depth_errors(payload: Any) -> List[Dict[str, str]]:
    """Check flood_depth, which is required and bounded only for floods."""
    if not isinstance(payload, dict) or payload.get("disaster_type") != FLOOD:
        return []

    card_data = payload.get("card_data")
    if not isinstance(card_data, dict):
        return []

    field = "card_data.flood_depth"
    depth = card_data.get("flood_depth")
    if depth is None:
        return [{"field": field, "message": "Field required when disaster_type is flood"}]

    is_integer = isinstance(depth, int) or (isinstance(depth, float) and depth.is_integer())
    if isinstance(depth, bool) or not is_integer:
        return [{"field": field, "message": "must be an integer"}]

    if not FLOOD_DEPTH_MIN <= depth <= FLOOD_DEPTH_MAX:
        return [{
            "field": field,
            "message": f"must be between {FLOOD_DEPTH_MIN} and {FLOOD_DEPTH_MAX}",
        }]
    return []


def validate_report(payload: Any, card_id: Optional[str] = None) -> ReportSubmission:
    """
    Validate a report submission payload.

    Args:
        payload: Decoded JSON body
        card_id: Card the report targets, echoed in the error body

    Returns:
        Validated ReportSubmission

    Raises:
        CardValidationError: listing every violated field
    """
    errors: List[Dict[str, Any]] = []
    report = None

    try:
        report = ReportSubmission.model_validate(payload)
    except ValidationError as e:
        errors.extend(e.errors())

    errors.extend(
        {"loc": tuple(err["field"].split(".")), "msg": err["message"]}
        for err in _flood_depth_errors(payload)
    )

    if errors:
        raise CardValidationError(format_errors(errors), card_id=card_id)

    return report

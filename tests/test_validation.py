"""
Tests for card payload validation
"""
import pytest
from pydantic import ValidationError

import sys
sys.path.insert(0, '.')

from src.cards.errors import CardValidationError
from src.cards.validation import (
    CardCreateRequest,
    ImagePatch,
    format_errors,
    validate_report,
)


class TestReportValidation:
    """Test suite for report submission validation."""

    def test_valid_flood_report(self, flood_report):
        """Test flood report with depth passes."""
        report = validate_report(flood_report)

        assert report.disaster_type == "flood"
        assert report.card_data.report_type == "flood"
        assert report.flood_depth == 30
        assert report.location.lat == -6.2088

    def test_valid_non_flood_report_without_depth(self, earthquake_report):
        """Test flood_depth is optional outside floods."""
        report = validate_report(earthquake_report)

        assert report.flood_depth is None
        assert report.text == ""

    def test_flood_without_depth_rejected(self, flood_report):
        """Test flood_depth is required for floods."""
        del flood_report["card_data"]["flood_depth"]

        with pytest.raises(CardValidationError) as exc_info:
            validate_report(flood_report, card_id="abc1234")

        assert exc_info.value.fields == ["card_data.flood_depth"]
        assert exc_info.value.card_id == "abc1234"
        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize("depth", [-1, 201, 1000])
    def test_flood_depth_out_of_range(self, flood_report, depth):
        """Test flood_depth bounded to [0, 200]."""
        flood_report["card_data"]["flood_depth"] = depth

        with pytest.raises(CardValidationError) as exc_info:
            validate_report(flood_report)

        assert "card_data.flood_depth" in exc_info.value.fields

    @pytest.mark.parametrize("depth", [0, 200])
    def test_flood_depth_bounds_inclusive(self, flood_report, depth):
        flood_report["card_data"]["flood_depth"] = depth
        assert validate_report(flood_report).flood_depth == depth

    def test_flood_depth_must_be_integer(self, flood_report):
        flood_report["card_data"]["flood_depth"] = 12.5

        with pytest.raises(CardValidationError) as exc_info:
            validate_report(flood_report)

        assert exc_info.value.fields == ["card_data.flood_depth"]

    def test_unknown_vocabulary_rejected(self, flood_report):
        """Test disaster and report types come from closed vocabularies."""
        flood_report["disaster_type"] = "meteor"
        flood_report["card_data"]["report_type"] = "aliens"

        with pytest.raises(CardValidationError) as exc_info:
            validate_report(flood_report)

        assert "disaster_type" in exc_info.value.fields
        assert "card_data.report_type" in exc_info.value.fields

    def test_every_violation_listed(self, flood_report):
        """Test all offending fields are reported at once."""
        flood_report["location"] = {"lat": 91, "lng": -181}
        flood_report["created_at"] = "not a date"
        flood_report["card_data"]["flood_depth"] = 500

        with pytest.raises(CardValidationError) as exc_info:
            validate_report(flood_report)

        fields = exc_info.value.fields
        assert "location.lat" in fields
        assert "location.lng" in fields
        assert "created_at" in fields
        assert "card_data.flood_depth" in fields

    def test_missing_required_fields(self):
        with pytest.raises(CardValidationError) as exc_info:
            validate_report({})

        fields = exc_info.value.fields
        for field in ("disaster_type", "card_data", "created_at", "location"):
            assert field in fields

    def test_created_at_must_be_string(self, flood_report):
        """Test epoch numbers are not accepted as ISO dates."""
        flood_report["created_at"] = 1760000000

        with pytest.raises(CardValidationError) as exc_info:
            validate_report(flood_report)

        assert exc_info.value.fields == ["created_at"]

    @pytest.mark.parametrize("created_at", ["1700000000", "yesterday", "2026-13-01T00:00:00Z", "19/10/2026"])
    def test_created_at_must_be_iso_8601(self, flood_report, created_at):
        """Test strings that are not ISO 8601 dates are rejected."""
        flood_report["created_at"] = created_at

        with pytest.raises(CardValidationError) as exc_info:
            validate_report(flood_report)

        assert exc_info.value.fields == ["created_at"]

    @pytest.mark.parametrize("created_at", ["2026-10-19", "2026-10-19T08:30:00.123Z", "2026-10-19 08:30:00-03:00"])
    def test_created_at_iso_variants(self, flood_report, created_at):
        flood_report["created_at"] = created_at

        report = validate_report(flood_report)

        assert report.created_at.year == 2026

    def test_text_null_rejected(self, flood_report):
        flood_report["text"] = None

        with pytest.raises(CardValidationError) as exc_info:
            validate_report(flood_report)

        assert exc_info.value.fields == ["text"]

    def test_text_may_be_empty_or_omitted(self, flood_report):
        flood_report["text"] = ""
        assert validate_report(flood_report).text == ""

        del flood_report["text"]
        assert validate_report(flood_report).text is None

    def test_unknown_field_rejected(self, flood_report):
        flood_report["severity"] = "high"

        with pytest.raises(CardValidationError) as exc_info:
            validate_report(flood_report)

        assert exc_info.value.fields == ["severity"]

    def test_non_object_payload(self):
        with pytest.raises(CardValidationError) as exc_info:
            validate_report(["flood"])

        assert exc_info.value.fields == ["body"]

    def test_error_body_shape(self, flood_report):
        del flood_report["location"]

        with pytest.raises(CardValidationError) as exc_info:
            validate_report(flood_report, card_id="abc1234")

        body = exc_info.value.to_dict()
        assert body["statusCode"] == 400
        assert body["cardId"] == "abc1234"
        assert body["errors"][0]["field"] == "location"


class TestCardCreateRequest:
    """Test suite for card creation body."""

    def test_valid(self, new_card):
        request = CardCreateRequest(**new_card)
        assert request.language == "en"

    def test_unknown_language(self, new_card):
        new_card["language"] = "xx"
        with pytest.raises(ValidationError):
            CardCreateRequest(**new_card)

    def test_missing_username(self, new_card):
        del new_card["username"]
        with pytest.raises(ValidationError):
            CardCreateRequest(**new_card)

    @pytest.mark.parametrize("field", ["username", "network"])
    def test_empty_string_rejected(self, new_card, field):
        new_card[field] = ""
        with pytest.raises(ValidationError) as exc_info:
            CardCreateRequest(**new_card)

        assert exc_info.value.errors()[0]["loc"] == (field,)


def test_image_patch_requires_url():
    with pytest.raises(ValidationError):
        ImagePatch()


def test_image_patch_rejects_empty_url():
    with pytest.raises(ValidationError):
        ImagePatch(image_url="")


def test_format_errors_strips_request_prefix():
    errors = [
        {"loc": ("body", "location", "lat"), "msg": "too big"},
        {"loc": ("path", "card_id"), "msg": "too short"},
        {"loc": ("body", "location", "lat"), "msg": "duplicate"},
    ]

    assert format_errors(errors) == [
        {"field": "location.lat", "message": "too big"},
        {"field": "card_id", "message": "too short"},
    ]

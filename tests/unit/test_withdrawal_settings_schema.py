"""
Unit tests for withdrawal settings schemas.

Covers slot string parsing, package limit validation and the stored
JSON shape of both payloads.
"""

from datetime import UTC, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from earnhub.schemas.withdrawal_settings import PackageLimit, TimeSlot, WithdrawalSettings


class TestTimeSlotParsing:
    """Parsing of 'day:startHour:endHour' strings."""

    def test_parse_valid_slot(self):
        slot = TimeSlot.parse("1:9:17")

        assert (slot.day, slot.start_hour, slot.end_hour) == (1, 9, 17)

    def test_parse_strips_whitespace(self):
        assert TimeSlot.parse(" 0:0:24 ").end_hour == 24

    @pytest.mark.parametrize(
        "raw",
        ["1:9", "1:9:17:00", "a:9:17", "7:9:17", "1:17:9", "1:9:9", "1:-1:5", "1:9:25"],
    )
    def test_parse_rejects_invalid(self, raw):
        with pytest.raises(ValueError):
            TimeSlot.parse(raw)

    def test_to_setting_round_trip(self):
        assert TimeSlot.parse("6:10:22").to_setting() == "6:10:22"

    def test_contains(self):
        slot = TimeSlot.parse("1:9:17")

        assert slot.contains(1, 9) is True
        assert slot.contains(1, 16) is True
        assert slot.contains(1, 17) is False
        assert slot.contains(2, 10) is False


class TestPackageLimit:
    """Package limit validation."""

    def test_min_above_max_rejected(self):
        with pytest.raises(ValidationError):
            PackageLimit(min=Decimal("100"), max=Decimal("50"), daily=Decimal("500"))

    def test_zero_daily_rejected(self):
        with pytest.raises(ValidationError):
            PackageLimit(min=Decimal("1"), max=Decimal("50"), daily=Decimal("0"))

    def test_negative_min_rejected(self):
        with pytest.raises(ValidationError):
            PackageLimit(min=Decimal("-1"), max=Decimal("50"), daily=Decimal("100"))

    def test_naive_cutover_becomes_utc(self):
        limit = PackageLimit.model_validate(
            {"min": 1, "max": 50, "daily": 100, "limit_activated_at": "2026-10-19T09:00:00"}
        )

        assert limit.limit_activated_at == datetime(2026, 10, 19, 9, 0, tzinfo=UTC)

    def test_offset_cutover_kept(self):
        limit = PackageLimit.model_validate(
            {"min": 1, "max": 50, "daily": 100, "limit_activated_at": "2026-10-19T12:00:00+03:00"}
        )

        assert limit.limit_activated_at.utcoffset() == timedelta(hours=3)


class TestStoredShape:
    """JSON written to the settings table."""

    def test_whole_amounts_stored_as_integers(self):
        limit = PackageLimit(min=Decimal("10"), max=Decimal("1000.00"), daily=Decimal("100"))

        assert limit.to_setting() == {"min": 10, "max": 1000, "daily": 100}

    def test_fractional_amounts_stored_as_text(self):
        limit = PackageLimit(min=Decimal("0.50"), max=Decimal("99.95"), daily=Decimal("100"))

        payload = limit.to_setting()

        assert payload["min"] == "0.5"
        assert payload["max"] == "99.95"

    def test_absent_cutover_is_omitted(self):
        limit = PackageLimit(min=Decimal("1"), max=Decimal("2"), daily=Decimal("3"))

        assert "limit_activated_at" not in limit.to_setting()

    def test_present_cutover_survives_round_trip(self):
        cutover = datetime(2026, 10, 19, 9, 30, tzinfo=timezone(timedelta(hours=2)))
        limit = PackageLimit(
            min=Decimal("1"), max=Decimal("2"), daily=Decimal("3"), limit_activated_at=cutover
        )

        restored = PackageLimit.model_validate(limit.to_setting())

        assert restored == limit
        assert restored.limit_activated_at == cutover

    def test_settings_from_storage(self):
        settings = WithdrawalSettings.from_storage(
            ["1:9:17", "3:10:12"],
            {"basic": {"min": 10, "max": 1000, "daily": 100}},
        )

        assert settings.slots_to_setting() == ["1:9:17", "3:10:12"]
        assert settings.limits_to_setting() == {
            "basic": {"min": 10, "max": 1000, "daily": 100}
        }

    def test_settings_from_empty_storage(self):
        settings = WithdrawalSettings.from_storage(None, None)

        assert settings.time_slots == []
        assert settings.package_limits == {}

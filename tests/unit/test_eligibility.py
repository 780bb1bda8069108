"""
Unit tests for the withdrawal eligibility evaluator.

Covers:
- Time slot gating (Sunday-based weekdays, end hour exclusive)
- Hard ceiling
- Package min / max / daily bounds and the remaining amount
- Daily total: counted statuses, local day, limit_activated_at cutover
"""

from datetime import UTC, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from earnhub.schemas.withdrawal_settings import PackageLimit, TimeSlot, WithdrawalSettings
from earnhub.services.withdrawal.eligibility import (
    ABOVE_HARD_CEILING,
    ABOVE_MAXIMUM,
    BELOW_MINIMUM,
    DAILY_LIMIT_EXCEEDED,
    DAILY_LIMIT_REACHED,
    TIME_SLOT_CLOSED,
    can_withdraw,
    check_time_slot,
    sum_today_withdrawals,
)
from earnhub.utils.datetime_utils import sunday_weekday


class TestSundayWeekday:
    """Weekday numbering used by time slots."""

    def test_sunday_is_zero(self):
        assert sunday_weekday(datetime(2026, 10, 18, 12, 0, tzinfo=UTC)) == 0

    def test_monday_is_one(self, monday_10am):
        assert sunday_weekday(monday_10am) == 1

    def test_saturday_is_six(self):
        assert sunday_weekday(datetime(2026, 10, 24, 12, 0, tzinfo=UTC)) == 6


class TestTimeSlots:
    """Time slot gating."""

    def test_no_slots_means_always_open(self, monday_10am):
        """Empty slot list does not restrict withdrawals."""
        result = check_time_slot(monday_10am, [], UTC)
        assert result.allowed is True

    def test_inside_monday_window(self, monday_10am, monday_slot_settings):
        result = can_withdraw(50, "basic", monday_10am, [], monday_slot_settings, tz=UTC)
        assert result.allowed is True

    def test_monday_evening_is_closed(self, monday_slot_settings):
        now = datetime(2026, 10, 19, 18, 0, tzinfo=UTC)

        result = can_withdraw(50, "basic", now, [], monday_slot_settings, tz=UTC)

        assert result.allowed is False
        assert result.error_code == TIME_SLOT_CLOSED
        assert result.details["time_slots"] == ["1:9:17"]

    def test_tuesday_morning_is_closed(self, monday_slot_settings):
        now = datetime(2026, 10, 20, 10, 0, tzinfo=UTC)

        result = can_withdraw(50, "basic", now, [], monday_slot_settings, tz=UTC)

        assert result.allowed is False
        assert result.error_code == TIME_SLOT_CLOSED

    def test_end_hour_is_exclusive(self, monday_slot_settings):
        """17:00 is outside a 9-17 window, 16:59 is inside."""
        inside = datetime(2026, 10, 19, 16, 59, tzinfo=UTC)
        outside = datetime(2026, 10, 19, 17, 0, tzinfo=UTC)

        assert can_withdraw(50, "basic", inside, [], monday_slot_settings, tz=UTC).allowed
        assert not can_withdraw(50, "basic", outside, [], monday_slot_settings, tz=UTC).allowed

    def test_slot_closed_regardless_of_amount(self, monday_slot_settings):
        """A closed window wins over any amount rule."""
        now = datetime(2026, 10, 20, 10, 0, tzinfo=UTC)

        result = can_withdraw(1, "basic", now, [], monday_slot_settings, tz=UTC)

        assert result.error_code == TIME_SLOT_CLOSED

    def test_local_timezone_decides_the_weekday(self, monday_slot_settings):
        """Sunday 23:00 UTC is Monday 10:00 in UTC+11."""
        now = datetime(2026, 10, 18, 23, 0, tzinfo=UTC)
        tz = timezone(timedelta(hours=11))

        result = can_withdraw(50, "basic", now, [], monday_slot_settings, tz=tz)

        assert result.allowed is True

    def test_any_matching_slot_opens(self, basic_limit):
        settings = WithdrawalSettings(
            time_slots=[TimeSlot.parse("2:9:12"), TimeSlot.parse("1:8:11")],
            package_limits={"basic": basic_limit},
        )

        result = can_withdraw(
            50, "basic", datetime(2026, 10, 19, 8, 30, tzinfo=UTC), [], settings, tz=UTC
        )

        assert result.allowed is True


class TestHardCeiling:
    """Global per-request ceiling."""

    def test_above_ceiling_rejected_even_within_package(self, monday_10am):
        """6001 fails although the package max and daily cap allow it."""
        settings = WithdrawalSettings(
            package_limits={
                "vip": PackageLimit(min=Decimal("1"), max=Decimal("10000"), daily=Decimal("50000"))
            }
        )

        result = can_withdraw(6001, "vip", monday_10am, [], settings, tz=UTC)

        assert result.allowed is False
        assert result.error_code == ABOVE_HARD_CEILING
        assert result.details["max"] == Decimal("6000")

    def test_exactly_at_ceiling_allowed(self, monday_10am):
        settings = WithdrawalSettings(
            package_limits={
                "vip": PackageLimit(min=Decimal("1"), max=Decimal("10000"), daily=Decimal("50000"))
            }
        )

        result = can_withdraw(6000, "vip", monday_10am, [], settings, tz=UTC)

        assert result.allowed is True

    def test_ceiling_applies_without_package_entry(self, monday_10am):
        result = can_withdraw(6001, "unknown", monday_10am, [], WithdrawalSettings(), tz=UTC)

        assert result.error_code == ABOVE_HARD_CEILING

    def test_custom_ceiling(self, monday_10am):
        result = can_withdraw(
            501, "unknown", monday_10am, [], WithdrawalSettings(), tz=UTC, hard_ceiling=500
        )

        assert result.error_code == ABOVE_HARD_CEILING


class TestPackageLimits:
    """Min / max / daily bounds."""

    def test_package_without_entry_is_unlimited(self, monday_10am, basic_settings):
        result = can_withdraw(5000, "gold", monday_10am, [], basic_settings, tz=UTC)

        assert result.allowed is True

    def test_below_minimum(self, monday_10am, basic_settings):
        result = can_withdraw(Decimal("9.99"), "basic", monday_10am, [], basic_settings, tz=UTC)

        assert result.allowed is False
        assert result.error_code == BELOW_MINIMUM
        assert result.details["min"] == Decimal("10")

    def test_above_maximum(self, monday_10am):
        settings = WithdrawalSettings(
            package_limits={
                "basic": PackageLimit(min=Decimal("10"), max=Decimal("50"), daily=Decimal("100"))
            }
        )

        result = can_withdraw(60, "basic", monday_10am, [], settings, tz=UTC)

        assert result.error_code == ABOVE_MAXIMUM
        assert result.details["max"] == Decimal("50")

    def test_first_withdrawal_within_daily_cap(self, monday_10am, basic_settings):
        result = can_withdraw(60, "basic", monday_10am, [], basic_settings, tz=UTC)

        assert result.allowed is True
        assert result.details["remaining"] == Decimal("40")

    def test_second_withdrawal_exceeds_daily_cap(
        self, monday_10am, basic_settings, make_withdrawal
    ):
        """60 already today, 60 more would exceed 100; remaining is 40."""
        history = [make_withdrawal(60)]

        result = can_withdraw(60, "basic", monday_10am, history, basic_settings, tz=UTC)

        assert result.allowed is False
        assert result.error_code == DAILY_LIMIT_EXCEEDED
        assert result.details["remaining"] == Decimal("40")
        assert result.details["today_total"] == Decimal("60")

    def test_exact_remaining_allowed(self, monday_10am, basic_settings, make_withdrawal):
        history = [make_withdrawal(60)]

        result = can_withdraw(40, "basic", monday_10am, history, basic_settings, tz=UTC)

        assert result.allowed is True
        assert result.details["remaining"] == Decimal("0")

    def test_cap_already_reached(self, monday_10am, basic_settings, make_withdrawal):
        history = [make_withdrawal(60, "paid"), make_withdrawal(40)]

        result = can_withdraw(10, "basic", monday_10am, history, basic_settings, tz=UTC)

        assert result.allowed is False
        assert result.error_code == DAILY_LIMIT_REACHED
        assert result.details["remaining"] == Decimal("0")


class TestTodayTotal:
    """Which withdrawals count toward the daily cap."""

    def test_rejected_requests_do_not_count(self, monday_10am, make_withdrawal):
        history = [make_withdrawal(60, "rejected"), make_withdrawal(30, "paid")]

        total = sum_today_withdrawals(history, monday_10am, UTC)

        assert total == Decimal("30")

    def test_approved_requests_count(self, monday_10am, make_withdrawal):
        total = sum_today_withdrawals([make_withdrawal(25, "approved")], monday_10am, UTC)

        assert total == Decimal("25")

    def test_yesterday_does_not_count(self, monday_10am, make_withdrawal):
        yesterday = datetime(2026, 10, 18, 23, 30, tzinfo=UTC)

        total = sum_today_withdrawals(
            [make_withdrawal(80, "paid", yesterday)], monday_10am, UTC
        )

        assert total == Decimal("0")

    def test_naive_timestamps_are_utc(self, monday_10am, make_withdrawal):
        """Rows read back from SQLite have no tzinfo."""
        naive = datetime(2026, 10, 19, 7, 0)

        total = sum_today_withdrawals([make_withdrawal(15, "paid", naive)], monday_10am, UTC)

        assert total == Decimal("15")

    def test_cutover_excludes_earlier_withdrawals(
        self, monday_10am, cutover_time, make_withdrawal
    ):
        """A paid 90 at 08:00 is ignored after a 09:00 cutover; 50 passes."""
        limit = PackageLimit(
            min=Decimal("10"),
            max=Decimal("1000"),
            daily=Decimal("100"),
            limit_activated_at=cutover_time,
        )
        settings = WithdrawalSettings(package_limits={"basic": limit})
        history = [make_withdrawal(90, "paid", datetime(2026, 10, 19, 8, 0, tzinfo=UTC))]

        result = can_withdraw(50, "basic", monday_10am, history, settings, tz=UTC)

        assert result.allowed is True
        assert result.details["today_total"] == Decimal("0")

    def test_without_cutover_earlier_withdrawals_count(
        self, monday_10am, basic_settings, make_withdrawal
    ):
        history = [make_withdrawal(90, "paid", datetime(2026, 10, 19, 8, 0, tzinfo=UTC))]

        result = can_withdraw(50, "basic", monday_10am, history, basic_settings, tz=UTC)

        assert result.allowed is False
        assert result.details["remaining"] == Decimal("10")

    def test_withdrawals_after_cutover_count(self, monday_10am, cutover_time, make_withdrawal):
        after = cutover_time + timedelta(minutes=30)

        total = sum_today_withdrawals(
            [make_withdrawal(45, "pending", after)], monday_10am, UTC, cutover_time
        )

        assert total == Decimal("45")


class TestAmountInput:
    """Amount coercion."""

    @pytest.mark.parametrize("amount", [50, "50", Decimal("50"), "50.00"])
    def test_accepts_numeric_forms(self, amount, monday_10am, basic_settings):
        result = can_withdraw(amount, "basic", monday_10am, [], basic_settings, tz=UTC)

        assert result.allowed is True

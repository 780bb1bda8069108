"""
Withdrawal eligibility evaluator.

Pure functions deciding whether a withdrawal amount is allowed right
now for a package. Nothing here touches the database: callers pass the
current time, the user's withdrawal history and the loaded settings.

Two independent gates must both pass:
- time slot: the current local weekday/hour falls in a configured window
  (no windows configured means always open)
- amount: a hard ceiling for every request, then the package's
  min / max / daily bounds when the package has an entry
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime, tzinfo
from decimal import Decimal
from typing import Any, Protocol

from earnhub.config.constants import DEFAULT_HARD_WITHDRAWAL_CEILING, ZERO
from earnhub.models.enums import COUNTED_WITHDRAWAL_STATUSES
from earnhub.schemas.withdrawal_settings import (
    PackageLimit,
    TimeSlot,
    WithdrawalSettings,
)
from earnhub.utils.datetime_utils import (
    ensure_aware,
    is_same_local_day,
    sunday_weekday,
    to_local,
)

# Error codes
TIME_SLOT_CLOSED = "TIME_SLOT_CLOSED"
ABOVE_HARD_CEILING = "ABOVE_HARD_CEILING"
BELOW_MINIMUM = "BELOW_MINIMUM"
ABOVE_MAXIMUM = "ABOVE_MAXIMUM"
DAILY_LIMIT_REACHED = "DAILY_LIMIT_REACHED"
DAILY_LIMIT_EXCEEDED = "DAILY_LIMIT_EXCEEDED"


class WithdrawalHistoryEntry(Protocol):
    """Anything with the fields of a withdrawal request row."""

    amount: Decimal
    status: str
    created_at: datetime


@dataclass
class EligibilityResult:
    """Outcome of an eligibility check with the limiting values."""

    allowed: bool
    reason: str | None = None
    error_code: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, **details: Any) -> "EligibilityResult":
        return cls(allowed=True, details=details)

    @classmethod
    def denied(
        cls, reason: str, error_code: str, **details: Any
    ) -> "EligibilityResult":
        return cls(
            allowed=False,
            reason=reason,
            error_code=error_code,
            details=details,
        )


def check_time_slot(
    now: datetime, time_slots: list[TimeSlot], tz: tzinfo
) -> EligibilityResult:
    """
    Check the current local time against the configured windows.

    Args:
        now: Current moment
        time_slots: Configured windows, empty means always open
        tz: Local server timezone

    Returns:
        Allowed result, or a TIME_SLOT_CLOSED denial listing the windows
    """
    if not time_slots:
        return EligibilityResult.ok()

    local = to_local(now, tz)
    weekday = sunday_weekday(local)

    if any(slot.contains(weekday, local.hour) for slot in time_slots):
        return EligibilityResult.ok()

    return EligibilityResult.denied(
        "Withdrawals are not available at this time",
        TIME_SLOT_CLOSED,
        weekday=weekday,
        hour=local.hour,
        time_slots=[slot.to_setting() for slot in time_slots],
    )


def sum_today_withdrawals(
    history: Iterable[WithdrawalHistoryEntry],
    now: datetime,
    tz: tzinfo,
    limit_activated_at: datetime | None = None,
) -> Decimal:
    """
    Total of today's withdrawals that count toward the daily cap.

    Counts pending, approved and paid requests created on the same
    local calendar day as ``now`` and, when a cutover is set, at or
    after it.
    """
    cutover = ensure_aware(limit_activated_at) if limit_activated_at else None

    total = ZERO
    for entry in history:
        if entry.status not in COUNTED_WITHDRAWAL_STATUSES:
            continue
        created_at = ensure_aware(entry.created_at)
        if not is_same_local_day(created_at, now, tz):
            continue
        if cutover is not None and created_at < cutover:
            continue
        total += Decimal(entry.amount)
    return total


def check_hard_ceiling(amount: Decimal, ceiling: Decimal) -> EligibilityResult:
    """Reject any single request above the global ceiling."""
    if amount > ceiling:
        return EligibilityResult.denied(
            f"Amount exceeds the maximum of {ceiling} per request",
            ABOVE_HARD_CEILING,
            amount=amount,
            max=ceiling,
        )
    return EligibilityResult.ok()


def check_amount_limits(
    amount: Decimal, limit: PackageLimit, today_total: Decimal
) -> EligibilityResult:
    """
    Check an amount against a package's min / max / daily bounds.

    Args:
        amount: Requested amount
        limit: Package bounds
        today_total: Amount already counted today

    Returns:
        Allowed result with the remaining headroom, or a denial
    """
    if amount < limit.min:
        return EligibilityResult.denied(
            f"Amount is below the minimum of {limit.min}",
            BELOW_MINIMUM,
            amount=amount,
            min=limit.min,
        )

    if amount > limit.max:
        return EligibilityResult.denied(
            f"Amount exceeds the maximum of {limit.max} per request",
            ABOVE_MAXIMUM,
            amount=amount,
            max=limit.max,
        )

    if today_total >= limit.daily:
        return EligibilityResult.denied(
            f"Daily limit of {limit.daily} reached",
            DAILY_LIMIT_REACHED,
            daily=limit.daily,
            today_total=today_total,
            remaining=ZERO,
        )

    remaining = limit.daily - today_total
    if amount > remaining:
        return EligibilityResult.denied(
            f"Amount would exceed the daily limit, remaining today: {remaining}",
            DAILY_LIMIT_EXCEEDED,
            amount=amount,
            daily=limit.daily,
            today_total=today_total,
            remaining=remaining,
        )

    return EligibilityResult.ok(
        daily=limit.daily,
        today_total=today_total,
        remaining=remaining - amount,
    )


def can_withdraw(
    amount: Decimal | int | str,
    package: str,
    now: datetime,
    history: Iterable[WithdrawalHistoryEntry],
    settings: WithdrawalSettings,
    tz: tzinfo | None = None,
    hard_ceiling: Decimal | int = DEFAULT_HARD_WITHDRAWAL_CEILING,
) -> EligibilityResult:
    """
    Decide whether a withdrawal is allowed right now.

    Args:
        amount: Requested amount
        package: User's package name
        now: Current moment
        history: User's withdrawal requests
        settings: Time slots and package limits
        tz: Local server timezone (defaults to the zone of ``now``)
        hard_ceiling: Global per-request ceiling

    Returns:
        EligibilityResult; denials carry the limiting values in details
    """
    amount = Decimal(str(amount))
    now = ensure_aware(now)
    local_tz = tz or now.tzinfo or UTC

    slot_result = check_time_slot(now, settings.time_slots, local_tz)
    if not slot_result.allowed:
        return slot_result

    ceiling_result = check_hard_ceiling(amount, Decimal(hard_ceiling))
    if not ceiling_result.allowed:
        return ceiling_result

    limit = settings.package_limits.get(package)
    if limit is None:
        return EligibilityResult.ok()

    today_total = sum_today_withdrawals(
        history, now, local_tz, limit.limit_activated_at
    )
    return check_amount_limits(amount, limit, today_total)

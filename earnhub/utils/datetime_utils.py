"""
Datetime utilities.

Provides timezone-aware datetime functions and the calendar windows
used by the profit job and the daily withdrawal cap.
"""

from datetime import UTC, datetime, timedelta, tzinfo


def utc_now() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Returns:
        Current datetime in UTC with timezone awareness
    """
    return datetime.now(UTC)


def ensure_aware(value: datetime) -> datetime:
    """
    Attach UTC to naive datetimes.

    Some drivers (SQLite) return naive values for timezone-aware
    columns; they are always stored as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def to_local(value: datetime, tz: tzinfo) -> datetime:
    """Convert a datetime to the given local zone."""
    return ensure_aware(value).astimezone(tz)


def sunday_weekday(moment: datetime) -> int:
    """Weekday number with Sunday = 0 ... Saturday = 6."""
    return moment.isoweekday() % 7


def day_window(now: datetime, tz: tzinfo) -> tuple[datetime, datetime]:
    """
    Get the local calendar day containing ``now``.

    Args:
        now: Reference moment
        tz: Local server timezone

    Returns:
        Tuple of (today 00:00, tomorrow 00:00) in local time
    """
    local = to_local(now, tz)
    start = local.replace(hour=0, minute=0, second=0, microsecond=0)
    # Rebuild through the date so DST shifts keep midnight
    end_date = start.date() + timedelta(days=1)
    end = datetime(end_date.year, end_date.month, end_date.day, tzinfo=tz)
    return start, end


def month_window(now: datetime, tz: tzinfo) -> tuple[datetime, datetime]:
    """
    Get the local calendar month containing ``now``.

    Args:
        now: Reference moment
        tz: Local server timezone

    Returns:
        Tuple of (first of month 00:00, first of next month 00:00)
    """
    local = to_local(now, tz)
    start = datetime(local.year, local.month, 1, tzinfo=tz)
    if local.month == 12:
        end = datetime(local.year + 1, 1, 1, tzinfo=tz)
    else:
        end = datetime(local.year, local.month + 1, 1, tzinfo=tz)
    return start, end


def is_same_local_day(value: datetime, now: datetime, tz: tzinfo) -> bool:
    """Check whether two moments fall on the same local calendar day."""
    return to_local(value, tz).date() == to_local(now, tz).date()

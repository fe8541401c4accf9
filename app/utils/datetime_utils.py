"""
Datetime utilities.

Provides timezone-aware datetime functions.
"""

import calendar
from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Returns:
        Current datetime in UTC with timezone awareness
    """
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """
    Attach UTC to naive datetimes (SQLite returns them without tzinfo).

    Args:
        value: Datetime from the database or caller

    Returns:
        Timezone-aware datetime in UTC
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def add_months(value: datetime, months: int) -> datetime:
    """
    Shift a datetime by whole calendar months, clamping the day.

    Args:
        value: Starting datetime
        months: Months to add (may be negative)

    Returns:
        Shifted datetime

    Example:
        >>> add_months(datetime(2024, 1, 31, tzinfo=UTC), 1).day
        29
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)

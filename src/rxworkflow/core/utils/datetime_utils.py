"""
Date and time utility functions for the RxWorkflow library.
"""

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union

SECONDS_PER_DAY = 24 * 60 * 60


def utc_now() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def resolve_now(now: Optional[datetime] = None) -> datetime:
    """Return ``now`` (made timezone-aware) or the current UTC time."""
    if now is None:
        return utc_now()
    return ensure_aware(now)


def add_months(value: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the end of the target month."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def add_days(value: datetime, days: int) -> datetime:
    """Add whole days."""
    return value + timedelta(days=days)


def minutes_between(start: datetime, end: datetime) -> float:
    """Signed minutes from ``start`` to ``end``."""
    return (ensure_aware(end) - ensure_aware(start)).total_seconds() / 60


def days_between(start: datetime, end: datetime) -> float:
    """Signed fractional days from ``start`` to ``end``."""
    return (ensure_aware(end) - ensure_aware(start)).total_seconds() / SECONDS_PER_DAY


def as_date(value: Union[date, datetime]) -> date:
    """Drop the time-of-day component."""
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_us_date(value: str) -> Optional[date]:
    """Parse ``MM/DD/YYYY``; returns None when the string is not a real date."""
    try:
        return datetime.strptime(value, "%m/%d/%Y").date()
    except ValueError:
        return None

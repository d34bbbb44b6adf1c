"""
DateTime utilities for consistent timezone handling.
"""
from datetime import datetime, timezone, timedelta
from typing import Optional


def utc_now() -> datetime:
    """
    Get the current UTC time with timezone awareness.

    Returns:
        datetime: Current UTC time with timezone info
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Ensure a datetime is timezone-aware and expressed in UTC.

    Naive datetimes are assumed to already be UTC.

    Args:
        dt: Datetime to normalize

    Returns:
        datetime: Timezone-aware UTC datetime
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    if dt.tzinfo != timezone.utc:
        return dt.astimezone(timezone.utc)
    return dt


def optional_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Like ensure_utc, but passes None through."""
    return ensure_utc(dt) if dt is not None else None


def minutes_from(base: datetime, minutes: float) -> datetime:
    """Return ``base`` shifted forward by ``minutes``."""
    return ensure_utc(base) + timedelta(minutes=minutes)


def format_iso(dt: Optional[datetime]) -> Optional[str]:
    """Format datetime as ISO 8601 string, or None."""
    if dt is None:
        return None
    return ensure_utc(dt).isoformat()

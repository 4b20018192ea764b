"""
Centralized DateTime Utilities
==============================

All document timestamps are taken in UTC.

Functions:
- now(): Returns timezone-aware UTC datetime
- to_iso(): Convert datetime object to RFC 3339 string
- format_date(): strftime wrapper that tolerates naive datetimes
"""
from datetime import datetime, timezone
from typing import Optional

DATE_SHORT_LAYOUT = "%b %d, %Y"
DATE_TIME_SHORT_LAYOUT = "%b %d, %Y - %H:%M"


def now() -> datetime:
    """
    Get current datetime in UTC.

    Returns:
        timezone-aware datetime object
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Treat naive datetimes (as returned by a non tz-aware client) as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def to_iso(dt: Optional[datetime]) -> Optional[str]:
    """
    Convert datetime object to an RFC 3339 string with second precision.

    Args:
        dt: datetime object (timezone-aware or naive)

    Returns:
        ISO 8601 formatted string ("Z" suffix for UTC), or None if dt is None
    """
    if dt is None:
        return None

    dt = ensure_utc(dt)
    if dt.utcoffset() == timezone.utc.utcoffset(None):
        return dt.replace(microsecond=0).isoformat().replace("+00:00", "Z")
    return dt.replace(microsecond=0).isoformat()


def format_date(dt: datetime, layout: str) -> str:
    return ensure_utc(dt).strftime(layout)

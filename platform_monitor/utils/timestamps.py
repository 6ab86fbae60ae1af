"""Timestamp utilities for UTC handling.

Sources report publication times in different shapes (ISO 8601 strings with
or without a 'Z' suffix, Unix epoch seconds). Everything is converted to
timezone-aware UTC datetimes here.
"""

from datetime import datetime, timezone
from typing import Optional, Union


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Example:
        >>> utc_now().tzinfo == timezone.utc
        True
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure a datetime is timezone-aware and in UTC.

    Naive datetimes are treated as UTC; aware ones are converted.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def parse_timestamp(value: Union[str, int, float, None]) -> Optional[datetime]:
    """Parse a source-provided timestamp to a UTC datetime.

    Supports:
    - ISO 8601 with 'Z' suffix (e.g. "2025-11-04T10:30:00.000Z")
    - ISO 8601 with offset or without timezone
    - Unix epoch seconds (int or float)

    Args:
        value: Raw timestamp value from a source payload

    Returns:
        UTC-aware datetime, or None if the value is empty or unparseable
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    cleaned = str(value).strip()
    if not cleaned:
        return None

    # fromisoformat on older interpreters rejects the 'Z' suffix
    if cleaned.endswith("Z"):
        cleaned = cleaned[:-1] + "+00:00"

    try:
        return ensure_utc(datetime.fromisoformat(cleaned))
    except ValueError:
        return None


def format_timestamp(dt: Optional[datetime]) -> str:
    """Format a datetime as an ISO 8601 UTC string with 'Z' suffix.

    Example:
        >>> format_timestamp(datetime(2025, 11, 4, 12, 0, tzinfo=timezone.utc))
        '2025-11-04T12:00:00Z'
    """
    dt_utc = ensure_utc(dt)
    if dt_utc is None:
        return ""
    return dt_utc.strftime("%Y-%m-%dT%H:%M:%SZ")

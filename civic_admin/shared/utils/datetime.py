"""
UTC datetime utilities for consistent timezone handling.

All datetime values in the system should be timezone-aware UTC.
Use these helpers instead of datetime.now() or datetime.utcnow().
"""

import math
from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Use at repository/persistence boundaries to normalize datetimes.

    Args:
        dt: A datetime that may be naive or aware

    Returns:
        UTC-aware datetime or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def from_timestamp_ms_utc(timestamp_ms: float) -> datetime:
    """
    Create a UTC-aware datetime from a millisecond Unix timestamp.
    The reporting client writes JavaScript Date.now() values in some fields.

    Args:
        timestamp_ms: Unix timestamp in milliseconds

    Returns:
        UTC-aware datetime
    """
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC)


def to_datetime(value: object) -> datetime | None:
    """
    Convert any stored timestamp variant to a UTC-aware datetime.

    Documents written by different clients carry Firestore timestamps
    (decoded to datetime), ISO-8601 strings, or epoch milliseconds.

    Args:
        value: datetime, ISO string, epoch milliseconds, or None

    Returns:
        UTC-aware datetime, or None when the value is missing or unparseable
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, (int, float)):
        try:
            return from_timestamp_ms_utc(value)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return ensure_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
        except ValueError:
            return None
    return None


def days_between(start: datetime, end: datetime) -> int:
    """Return whole days between two datetimes, rounded up (absolute value)."""
    seconds = abs((end - start).total_seconds())
    return math.ceil(seconds / 86400)

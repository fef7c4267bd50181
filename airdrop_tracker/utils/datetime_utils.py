"""
Datetime utilities.

Provides timezone-aware datetime functions.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Returns:
        Current datetime in UTC with timezone awareness
    """
    return datetime.now(UTC)


def from_unix(timestamp: int | None) -> datetime | None:
    """Convert a block timestamp (seconds) to an aware UTC datetime."""
    if timestamp is None:
        return None
    return datetime.fromtimestamp(int(timestamp), UTC)


def isoformat_or_none(value: datetime | None) -> str | None:
    """ISO-8601 string, assuming UTC for naive values."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.isoformat()


def ensure_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes read back from SQLite."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)

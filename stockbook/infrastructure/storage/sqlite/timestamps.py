"""Timestamp encoding for SQLite TEXT columns.

All timestamps are stored as UTC ISO-8601 strings with fixed microsecond
precision so that string comparison in SQL matches chronological order.
"""

from datetime import datetime

from stockbook.core.exceptions import DatabaseError
from stockbook.core.validators import ensure_utc


def to_db_timestamp(value: datetime) -> str:
    return ensure_utc(value).isoformat(timespec="microseconds")


def from_db_timestamp(value: str | None) -> datetime:
    """Parse a stored timestamp; an unreadable value is a storage fault."""
    if not value:
        raise DatabaseError("read", "missing timestamp")
    try:
        return ensure_utc(datetime.fromisoformat(value))
    except (ValueError, TypeError, OverflowError):
        raise DatabaseError("read", f"invalid timestamp {value!r}") from None

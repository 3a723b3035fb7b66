"""
Shared validation primitives.

Inputs may arrive as already-typed values or as raw strings from query
strings and form bodies, so each rule accepts both.
"""

import math
from datetime import UTC, date, datetime
from typing import Any

from stockbook.core.exceptions import ValidationError

# Largest integer a JSON number can carry without precision loss
MAX_SAFE_INTEGER = 2**53 - 1


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_number(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(field, "must be a valid number", value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise ValidationError(field, "must be a valid number", value) from None
    else:
        raise ValidationError(field, "must be a valid number", value)
    if not math.isfinite(number):
        raise ValidationError(field, "must be a valid number", value)
    return number


def _parse_integer(value: Any, field: str) -> int:
    number = _parse_number(value, field)
    if isinstance(number, float):
        if not number.is_integer():
            raise ValidationError(field, "must be an integer", value)
        number = int(number)
    if abs(number) > MAX_SAFE_INTEGER:
        raise ValidationError(field, "is too large", value)
    return number


def validate_positive_integer(value: Any, field: str) -> int:
    """Parse a strictly positive integer (quantities)."""
    if _is_missing(value):
        raise ValidationError(field, "is required")
    number = _parse_integer(value, field)
    if number <= 0:
        raise ValidationError(field, "must be greater than 0", value)
    return number


def validate_non_negative_integer(
    value: Any, field: str, default: int | None = None
) -> int:
    """Parse an integer >= 0, falling back to ``default`` when absent."""
    if _is_missing(value):
        if default is None:
            raise ValidationError(field, "is required")
        return default
    number = _parse_integer(value, field)
    if number < 0:
        raise ValidationError(field, "cannot be negative", value)
    return number


def validate_non_negative_number(value: Any, field: str) -> float:
    """Parse a finite real >= 0 (prices)."""
    if _is_missing(value):
        raise ValidationError(field, "is required")
    number = float(_parse_number(value, field))
    if number < 0:
        raise ValidationError(field, "must be 0 or greater", value)
    return number


def validate_non_empty_string(value: Any, field: str) -> str:
    """Return the trimmed string, rejecting blanks and non-strings."""
    if value is None:
        raise ValidationError(field, "is required")
    if not isinstance(value, str):
        raise ValidationError(field, "must be a string", value)
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(field, "cannot be empty", value)
    return trimmed


def normalize_sku(value: Any) -> str:
    """Validate a SKU and normalize it to trimmed uppercase."""
    return validate_non_empty_string(value, "SKU").upper()


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def validate_timestamp(value: Any, field: str) -> datetime:
    """Accept a datetime, date or ISO-8601 string and return it in UTC."""
    if _is_missing(value):
        raise ValidationError(field, "is required")
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            raise ValidationError(field, "must be an ISO-8601 date", value) from None
    else:
        raise ValidationError(field, "must be a valid date", value)

    # Offsets near datetime.min/max cannot be shifted to UTC
    try:
        return ensure_utc(parsed)
    except OverflowError:
        raise ValidationError(field, "is out of range", value) from None

"""Coercion helpers shared by the record models.

Records arrive as plain dictionaries decoded from JSON. These helpers turn
their loosely typed values into the types the engine works with and raise
``InvalidEventError`` for anything that cannot be interpreted safely.
"""
from datetime import datetime
from typing import Any, Optional

import pytz

from .errors import InvalidEventError

SCALE_MIN = 1
SCALE_MAX = 10


def parse_timestamp(value: Any, field: str = 'timestamp') -> datetime:
    """Parse an ISO 8601 string or datetime into an aware UTC-comparable datetime.

    Naive values are taken to be UTC, matching how timestamps are stored.
    """
    if value is None or value == '':
        raise InvalidEventError(f"'{field}' is required.", field)

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith('Z') or text.endswith('z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise InvalidEventError(f"'{field}' is not a valid ISO 8601 timestamp: {value!r}", field)
    else:
        raise InvalidEventError(f"'{field}' must be a datetime or ISO 8601 string, got {type(value).__name__}.", field)

    if parsed.tzinfo is None:
        parsed = pytz.UTC.localize(parsed)
    return parsed


def coerce_int(value: Any, field: str, required: bool = False) -> Optional[int]:
    """Convert numeric input to int; blank values become None."""
    if value is None or value == '':
        if required:
            raise InvalidEventError(f"'{field}' is required.", field)
        return None
    if isinstance(value, bool):
        raise InvalidEventError(f"'{field}' must be an integer, got a boolean.", field)
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidEventError(f"'{field}' must be a whole number, got {value}.", field)
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidEventError(f"Invalid numeric value for '{field}': {value!r}", field)


def coerce_bool(value: Any, field: str, default: bool = False) -> bool:
    if value is None or value == '':
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ('true', '1', 'yes', 'y'):
            return True
        if lowered in ('false', '0', 'no', 'n'):
            return False
    raise InvalidEventError(f"'{field}' must be a boolean, got {value!r}", field)


def clamp_scale(value: Any, field: str = 'intensity') -> Optional[int]:
    """Clamp a 1-10 rating into range; None stays None."""
    value = coerce_int(value, field)
    if value is None:
        return None
    return max(SCALE_MIN, min(SCALE_MAX, value))


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None

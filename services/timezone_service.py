"""Timezone handling and time-of-day bucketing.

Timestamps are stored in UTC. Everything that depends on a user's day
(which day-part a craving fell in, which calendar date it belongs to) is
computed on the user's local time, converted here in one place.
"""
import logging
from datetime import datetime, date
from typing import Tuple

import pytz
from pytz import timezone as pytz_timezone

from models import InvalidEventError, TimeBucket
from models.validation import parse_timestamp

logger = logging.getLogger(__name__)


def get_timezone_object(timezone_str: str) -> pytz.BaseTzInfo:
    """Get timezone object from timezone string."""
    if not timezone_str:
        return pytz.UTC
    try:
        return pytz_timezone(timezone_str)
    except pytz.exceptions.UnknownTimeZoneError:
        # Fallback to UTC if timezone is invalid
        logger.warning(f"Unknown timezone {timezone_str!r}, falling back to UTC")
        return pytz.UTC


def validate_timezone(timezone_str: str) -> bool:
    """Return True if the timezone name is known."""
    try:
        pytz_timezone(timezone_str)
        return True
    except pytz.exceptions.UnknownTimeZoneError:
        return False


def convert_utc_to_user_time(user_timezone: str, utc_datetime: datetime) -> Tuple[datetime, date, int]:
    """
    Convert a UTC datetime to the user's local time.

    Args:
        user_timezone: User's timezone string
        utc_datetime: UTC datetime, naive values are taken to be UTC

    Returns:
        Tuple of (local_datetime, local_date, local_hour)
    """
    if not isinstance(utc_datetime, datetime):
        raise InvalidEventError(
            f"Expected a datetime, got {type(utc_datetime).__name__}: {utc_datetime!r}", 'timestamp'
        )

    # Ensure UTC datetime is timezone-aware
    if utc_datetime.tzinfo is None:
        utc_datetime = pytz.UTC.localize(utc_datetime)

    user_tz = get_timezone_object(user_timezone)
    local_datetime = utc_datetime.astimezone(user_tz)

    return local_datetime, local_datetime.date(), local_datetime.hour


def get_user_date(timestamp: datetime, user_timezone: str = 'UTC') -> date:
    """Calendar date of a timestamp in the user's timezone."""
    _, local_date, _ = convert_utc_to_user_time(user_timezone, timestamp)
    return local_date


def get_time_bucket(timestamp, user_timezone: str = 'UTC') -> TimeBucket:
    """Map a timestamp to its day-part using the user's local hour.

    Accepts a datetime or an ISO 8601 string; anything else fails fast
    rather than landing in a default bucket.
    """
    if isinstance(timestamp, str):
        timestamp = parse_timestamp(timestamp)
    _, _, hour = convert_utc_to_user_time(user_timezone, timestamp)
    return TimeBucket.from_hour(hour)


def get_current_utc_time() -> datetime:
    """The wall clock, read once at the edge and passed down as ``now``."""
    return datetime.now(pytz.UTC)

"""Request parsing shared by the JSON blueprints.

Every engine endpoint receives the user's event snapshot in the request
body; nothing is stored server-side. These helpers pull the snapshot, the
user's timezone and the current instant out of a request.
"""
from flask import current_app, request

from models import InvalidEventError, parse_events, parse_outcomes
from models.validation import parse_timestamp
from services.timezone_service import get_current_utc_time, validate_timezone


def get_payload() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidEventError('Request body must be a JSON object.')
    return data


def _check_size(records, name):
    limit = current_app.config['MAX_EVENTS_PER_REQUEST']
    if isinstance(records, list) and len(records) > limit:
        raise InvalidEventError(f"Too many {name}: {len(records)} (limit {limit}).", name)


def load_events(data: dict):
    records = data.get('events', [])
    _check_size(records, 'events')
    return parse_events(records)


def load_outcomes(data: dict):
    """Outcomes given directly, or taken from the events' embedded outcomes."""
    if 'outcomes' in data:
        _check_size(data['outcomes'], 'outcomes')
        return parse_outcomes(data['outcomes'])
    from services.log_filter_service import outcomes_of
    return outcomes_of(load_events(data))


def get_timezone(data: dict) -> str:
    user_timezone = data.get('timezone') or current_app.config['DEFAULT_TIMEZONE']
    if not validate_timezone(user_timezone):
        raise InvalidEventError(f"Unknown timezone: {user_timezone!r}", 'timezone')
    return user_timezone


def get_now(data: dict):
    """The instant to compute against; the wall clock unless the caller pins one."""
    if data.get('now'):
        return parse_timestamp(data['now'], 'now')
    return get_current_utc_time()


def get_optional_timestamp(data: dict, field: str):
    if data.get(field) in (None, ''):
        return None
    return parse_timestamp(data[field], field)

from flask import Blueprint, jsonify, current_app, abort

from models import InvalidEventError
from models.validation import coerce_bool, coerce_int, optional_text
from routes.helpers import get_now, get_payload
from services.session_service import (
    complete_session,
    start_session,
    update_intensity,
)


sessions_bp = Blueprint('sessions', __name__)


def _registry():
    return current_app.extensions['session_registry']


def _get_session_or_404(session_id):
    session = _registry().get(session_id)
    if session is None:
        abort(404)
    return session


def _require_intensity(data, field):
    intensity = coerce_int(data.get(field), field, required=True)
    if not (1 <= intensity <= 10):
        raise InvalidEventError(f"{field.replace('_', ' ').capitalize()} must be between 1 and 10.", field)
    return intensity


@sessions_bp.route('', methods=['POST'])
def create_session():
    """Start an intervention session for a trigger."""
    data = get_payload()
    trigger = data.get('trigger', '')
    initial_intensity = _require_intensity(data, 'initial_intensity')
    now = get_now(data)

    session = start_session(trigger, initial_intensity, now, data.get('intervention_type'))
    _registry().add(session, now)

    current_app.logger.info(f'Intervention session {session.id} started')
    return jsonify(session.to_dict(now)), 201


@sessions_bp.route('/<session_id>', methods=['GET'])
def get_session(session_id):
    """Live state and elapsed time of a running session."""
    session = _get_session_or_404(session_id)
    return jsonify(session.to_dict(get_now({})))


@sessions_bp.route('/<session_id>/intensity', methods=['PATCH'])
def set_intensity(session_id):
    session = _get_session_or_404(session_id)
    data = get_payload()
    update_intensity(session, _require_intensity(data, 'intensity'))
    return jsonify(session.to_dict(get_now(data)))


@sessions_bp.route('/<session_id>/method', methods=['POST'])
def switch_method(session_id):
    session = _get_session_or_404(session_id)
    data = get_payload()
    if not data.get('intervention_type'):
        raise InvalidEventError("'intervention_type' is required.", 'intervention_type')
    session.switch_method(data['intervention_type'])
    return jsonify(session.to_dict(get_now(data)))


@sessions_bp.route('/<session_id>/complete', methods=['POST'])
def finish_session(session_id):
    """Resolve a session and hand back the outcome for the caller to store."""
    session = _get_session_or_404(session_id)
    data = get_payload()
    if 'successful' not in data:
        raise InvalidEventError("'successful' is required.", 'successful')

    outcome = complete_session(
        session,
        coerce_bool(data['successful'], 'successful'),
        get_now(data),
        optional_text(data.get('notes')),
    )
    _registry().remove(session_id)

    current_app.logger.info(f'Intervention session {session_id} completed')
    return jsonify(outcome.to_dict()), 201


@sessions_bp.route('/<session_id>', methods=['DELETE'])
def abandon_session(session_id):
    """Drop a running session without recording an outcome."""
    session = _registry().remove(session_id)
    if session is None:
        abort(404)
    return jsonify(success=True, id=session_id)

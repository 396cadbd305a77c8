from datetime import timedelta

import pytest

from tests.conftest import NOW
from models import InterventionType
from services.session_service import (
    InterventionSession,
    SessionRegistry,
    SessionState,
    SessionStateError,
    complete_session,
    start_session,
    update_intensity,
)


def test_session_lifecycle():
    session = InterventionSession('Stress', 8, 'breathing')
    assert session.state is SessionState.IDLE
    assert session.elapsed_seconds(NOW) == 0

    session.start(NOW)
    assert session.state is SessionState.RUNNING
    assert session.elapsed_seconds(NOW + timedelta(seconds=90)) == 90

    update_intensity(session, 5)
    update_intensity(session, 3)

    outcome = complete_session(session, True, NOW + timedelta(minutes=4))
    assert session.state is SessionState.COMPLETED
    assert outcome.successful is True
    assert outcome.intervention_type is InterventionType.BREATHING
    assert outcome.intensity_before == 8
    assert outcome.intensity_after == 3
    assert outcome.intensity_reduction == 5
    assert outcome.duration_seconds == 240
    assert outcome.trigger == 'stress'
    assert outcome.timestamp == NOW + timedelta(minutes=4)
    assert 'Successfully managed a stress trigger' in outcome.notes


def test_still_craving_records_failure():
    session = start_session('boredom', 6, NOW, InterventionType.DISTRACT)
    update_intensity(session, 9)
    outcome = complete_session(session, False, NOW + timedelta(seconds=30))
    assert outcome.successful is False
    assert outcome.intensity_reduction == -3


def test_completed_session_is_terminal():
    session = start_session('stress', 6, NOW)
    complete_session(session, True, NOW)
    with pytest.raises(SessionStateError):
        complete_session(session, False, NOW)
    with pytest.raises(SessionStateError):
        update_intensity(session, 2)
    with pytest.raises(SessionStateError):
        session.start(NOW)


def test_cannot_update_before_start():
    session = InterventionSession('stress', 6)
    with pytest.raises(SessionStateError):
        session.update_intensity(4)


def test_elapsed_time_freezes_on_completion():
    session = start_session('stress', 6, NOW)
    complete_session(session, True, NOW + timedelta(seconds=45))
    assert session.elapsed_seconds(NOW + timedelta(hours=2)) == 45


def test_intensity_is_clamped():
    session = start_session('stress', 14, NOW)
    assert session.initial_intensity == 10
    assert update_intensity(session, 0) == 1


def test_switch_method_while_running():
    session = start_session('stress', 6, NOW, 'timer')
    session.switch_method('Reframing')
    assert complete_session(session, True, NOW).intervention_type is InterventionType.REFRAME


def test_new_session_is_independent():
    first = start_session('stress', 6, NOW)
    complete_session(first, True, NOW)
    second = start_session('stress', 6, NOW)
    assert second.state is SessionState.RUNNING
    assert second.id != first.id


def test_registry_limits_running_sessions():
    registry = SessionRegistry(max_sessions=1)
    session = registry.add(start_session('stress', 6, NOW))
    with pytest.raises(SessionStateError):
        registry.add(start_session('stress', 6, NOW))
    assert registry.remove(session.id) is session
    assert registry.get(session.id) is None
    assert len(registry) == 0


def test_registry_evicts_abandoned_sessions():
    registry = SessionRegistry(max_sessions=2, max_age_seconds=600)
    abandoned = registry.add(start_session('stress', 6, NOW))
    registry.add(start_session('boredom', 4, NOW + timedelta(minutes=5)))

    with pytest.raises(SessionStateError):
        registry.add(start_session('stress', 6, NOW + timedelta(minutes=9)))

    fresh = registry.add(start_session('stress', 6, NOW + timedelta(minutes=11)))
    assert registry.get(abandoned.id) is None
    assert registry.get(fresh.id) is fresh
    assert len(registry) == 2


def test_registry_without_age_limit_keeps_sessions():
    registry = SessionRegistry(max_sessions=5)
    session = registry.add(start_session('stress', 6, NOW))
    registry.add(start_session('stress', 6, NOW + timedelta(days=2)))
    assert registry.get(session.id) is session

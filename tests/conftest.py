"""
Pytest configuration and shared fixtures for the test suite.
"""
import itertools
from datetime import datetime, timedelta, timezone

import pytest

from app import create_app
from models import CravingEvent, InterventionOutcome, InterventionType

# Monday; a fixed instant keeps every "now"-dependent result deterministic.
NOW = datetime(2024, 3, 11, 15, 0, tzinfo=timezone.utc)

_ids = itertools.count(1)


def make_event(hour=9, day=0, intensity=5, trigger='stress', resisted=False,
               outcome=None, mood_before=None, duration_minutes=None, minute=0):
    """Craving event at ``hour`` on the day ``day`` days before NOW."""
    timestamp = (NOW - timedelta(days=day)).replace(hour=hour, minute=minute)
    return CravingEvent(
        id=f'evt-{next(_ids)}',
        user_id='user-1',
        timestamp=timestamp,
        intensity=intensity,
        trigger=trigger,
        resisted=resisted,
        mood_before=mood_before,
        duration_minutes=duration_minutes,
        intervention_outcome=outcome,
    )


def make_outcome(method=InterventionType.BREATHING, successful=True, hour=9, day=0,
                 before=None, after=None, minute=0, reduction=None):
    timestamp = (NOW - timedelta(days=day)).replace(hour=hour, minute=minute)
    return InterventionOutcome(
        intervention_type=method,
        successful=successful,
        timestamp=timestamp,
        intensity_before=before,
        intensity_after=after,
        reported_reduction=reduction,
    )


def make_attempt(method, successful, hour=14, day=0, trigger='stress', intensity=6, minute=0):
    """A craving event carrying the outcome of one intervention."""
    outcome = make_outcome(method, successful, hour=hour, day=day, minute=minute,
                           before=intensity, after=max(1, intensity - 3) if successful else intensity)
    return make_event(hour=hour, day=day, intensity=intensity, trigger=trigger,
                      resisted=successful, outcome=outcome, minute=minute)


def event_record(**overrides):
    """Plain JSON record as the log store returns it."""
    record = {
        'id': 'evt-json',
        'user_id': 'user-1',
        'timestamp': '2024-03-11T09:30:00Z',
        'intensity': 7,
        'trigger': 'Stress',
        'resisted': True,
    }
    record.update(overrides)
    return record


@pytest.fixture
def now():
    return NOW


@pytest.fixture(scope='function')
def app():
    """Create application for testing."""
    app = create_app('testing')
    app.config.update({
        'SECRET_KEY': 'test-secret-key',
    })
    yield app


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def morning_events():
    """Three morning cravings: two stress, one boredom."""
    return [
        make_event(hour=8, intensity=8, trigger='stress'),
        make_event(hour=9, intensity=6, trigger='stress'),
        make_event(hour=10, intensity=7, trigger='boredom'),
    ]


@pytest.fixture
def afternoon_history():
    """Three breathing attempts (two worked) and two timer attempts (both worked)."""
    return [
        make_attempt(InterventionType.BREATHING, True, hour=13, day=3),
        make_attempt(InterventionType.BREATHING, False, hour=14, day=2),
        make_attempt(InterventionType.BREATHING, True, hour=15, day=1),
        make_attempt(InterventionType.TIMER, True, hour=13, day=2, minute=30),
        make_attempt(InterventionType.TIMER, True, hour=16, day=1, minute=30),
    ]

"""Intervention session lifecycle.

A session follows one coping attempt: it is started when the user picks a
technique, tracks a running intensity estimate while it runs, and ends
with exactly one InterventionOutcome once the user reports whether the
craving passed. Sessions are owned by a single caller. Abandoning a
running session is allowed and records nothing.
"""
import logging
import threading
import uuid
from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from models import InterventionOutcome, InterventionType, normalize_trigger
from models.validation import clamp_scale, parse_timestamp

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = 'idle'
    RUNNING = 'running'
    COMPLETED = 'completed'


class SessionStateError(RuntimeError):
    """An operation was attempted in a state that does not allow it."""


class InterventionSession:
    def __init__(self, trigger: str, initial_intensity: int,
                 intervention_type=InterventionType.OTHER, session_id: str = None):
        if initial_intensity is None:
            raise ValueError('initial_intensity is required')
        self.id = session_id or uuid.uuid4().hex
        self.trigger = normalize_trigger(trigger)
        self.intervention_type = InterventionType.from_label(intervention_type)
        self.initial_intensity = clamp_scale(initial_intensity, 'initial_intensity')
        self.current_intensity = self.initial_intensity
        self.state = SessionState.IDLE
        self.started_at: Optional[datetime] = None
        self.outcome: Optional[InterventionOutcome] = None

    def _require(self, state: SessionState, action: str):
        if self.state is not state:
            raise SessionStateError(f'Cannot {action} a session that is {self.state.value}')

    def start(self, now: datetime) -> 'InterventionSession':
        self._require(SessionState.IDLE, 'start')
        self.started_at = parse_timestamp(now, 'now')
        self.state = SessionState.RUNNING
        logger.debug(f"Session {self.id} started for trigger {self.trigger!r} at intensity {self.initial_intensity}")
        return self

    def elapsed_seconds(self, now: datetime) -> int:
        """Whole seconds since start; frozen once the session completes."""
        if self.state is SessionState.IDLE:
            return 0
        if self.state is SessionState.COMPLETED:
            return self.outcome.duration_seconds
        elapsed = (parse_timestamp(now, 'now') - self.started_at).total_seconds()
        return max(0, int(elapsed))

    def update_intensity(self, value: int) -> int:
        self._require(SessionState.RUNNING, 'update intensity of')
        if value is None:
            raise ValueError('intensity is required')
        self.current_intensity = clamp_scale(value)
        return self.current_intensity

    def switch_method(self, intervention_type) -> InterventionType:
        """Change technique mid-session; the outcome records the last one used."""
        self._require(SessionState.RUNNING, 'switch method of')
        self.intervention_type = InterventionType.from_label(intervention_type)
        return self.intervention_type

    def complete(self, successful: bool, now: datetime, notes: str = None) -> InterventionOutcome:
        self._require(SessionState.RUNNING, 'complete')
        now = parse_timestamp(now, 'now')
        if notes is None:
            notes = (
                f"{'Successfully' if successful else 'Unsuccessfully'} managed a "
                f"{self.trigger} trigger using {self.intervention_type.value}."
            )
        self.outcome = InterventionOutcome(
            intervention_type=self.intervention_type,
            successful=bool(successful),
            timestamp=now,
            intensity_before=self.initial_intensity,
            intensity_after=self.current_intensity,
            duration_seconds=self.elapsed_seconds(now),
            trigger=self.trigger,
            notes=notes,
        )
        self.state = SessionState.COMPLETED
        logger.debug(f"Session {self.id} completed: {self.outcome!r}")
        return self.outcome

    def to_dict(self, now: datetime) -> dict:
        return {
            'id': self.id,
            'state': self.state.value,
            'trigger': self.trigger,
            'intervention_type': self.intervention_type.value,
            'initial_intensity': self.initial_intensity,
            'current_intensity': self.current_intensity,
            'started_at': self.started_at.isoformat() if self.started_at else None,
            'elapsed_seconds': self.elapsed_seconds(now),
            'outcome': self.outcome.to_dict() if self.outcome else None,
        }

    def __repr__(self) -> str:
        return f'<InterventionSession {self.id} - {self.state.value} - {self.trigger}>'


def start_session(trigger: str, initial_intensity: int, now: datetime,
                  intervention_type=InterventionType.OTHER) -> InterventionSession:
    """Create a session and move it straight to running."""
    return InterventionSession(trigger, initial_intensity, intervention_type).start(now)


def update_intensity(session: InterventionSession, value: int) -> int:
    return session.update_intensity(value)


def complete_session(session: InterventionSession, successful: bool, now: datetime,
                     notes: str = None) -> InterventionOutcome:
    return session.complete(successful, now, notes)


class SessionRegistry:
    """Running sessions for the HTTP layer, keyed by session id.

    Completed and abandoned sessions are dropped; the outcome goes back to
    the caller, who owns persisting it. A session left running for longer
    than ``max_age_seconds`` counts as abandoned and is evicted the next
    time a session is added.
    """

    def __init__(self, max_sessions: int = 1000, max_age_seconds: Optional[int] = None):
        self.max_sessions = max_sessions
        self.max_age_seconds = max_age_seconds
        self._sessions: Dict[str, InterventionSession] = {}
        self._lock = threading.Lock()

    def _drop_stale(self, now: datetime) -> int:
        if not self.max_age_seconds:
            return 0
        stale = [
            session_id for session_id, session in self._sessions.items()
            if session.elapsed_seconds(now) > self.max_age_seconds
        ]
        for session_id in stale:
            del self._sessions[session_id]
        if stale:
            logger.info(f"Evicted {len(stale)} abandoned intervention sessions")
        return len(stale)

    def add(self, session: InterventionSession, now: datetime = None) -> InterventionSession:
        now = now if now is not None else session.started_at
        with self._lock:
            if now is not None:
                self._drop_stale(parse_timestamp(now, 'now'))
            if len(self._sessions) >= self.max_sessions:
                raise SessionStateError('Too many running sessions')
            self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> Optional[InterventionSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def remove(self, session_id: str) -> Optional[InterventionSession]:
        with self._lock:
            return self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

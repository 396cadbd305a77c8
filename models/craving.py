"""Craving model definition.
Represents a single logged craving, optionally with the outcome of the
intervention the user tried against it.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from .errors import InvalidEventError
from .intervention import InterventionOutcome
from .trigger import TriggerCategory, normalize_trigger
from .validation import (
    clamp_scale,
    coerce_bool,
    coerce_int,
    optional_text,
    parse_timestamp,
)


@dataclass(frozen=True)
class CravingEvent:
    id: str
    user_id: str
    timestamp: datetime
    intensity: int
    trigger: str
    resisted: bool = False
    duration_minutes: Optional[int] = None
    location: Optional[str] = None
    mood_before: Optional[int] = None
    notes: Optional[str] = None
    intervention_outcome: Optional[InterventionOutcome] = None

    def __post_init__(self):
        object.__setattr__(self, 'timestamp', parse_timestamp(self.timestamp))
        object.__setattr__(self, 'intensity', clamp_scale(self.intensity))
        if self.intensity is None:
            raise InvalidEventError("'intensity' is required.", 'intensity')
        object.__setattr__(self, 'mood_before', clamp_scale(self.mood_before, 'mood_before'))
        object.__setattr__(self, 'trigger', normalize_trigger(self.trigger))
        if self.duration_minutes is not None and self.duration_minutes <= 0:
            raise InvalidEventError("'duration_minutes' must be a positive number of minutes.", 'duration_minutes')

    @property
    def trigger_category(self) -> TriggerCategory:
        return TriggerCategory.from_label(self.trigger)

    @property
    def has_outcome(self) -> bool:
        return self.intervention_outcome is not None

    @classmethod
    def from_dict(cls, data: dict) -> 'CravingEvent':
        """Build an event from a plain record as stored by the log store."""
        if not isinstance(data, dict):
            raise InvalidEventError('Craving event must be an object.')

        timestamp = parse_timestamp(data.get('timestamp'))

        outcome = None
        raw_outcome = data.get('intervention_outcome')
        if raw_outcome:
            outcome = InterventionOutcome.from_dict(raw_outcome, default_timestamp=timestamp)

        return cls(
            id=str(data['id']) if data.get('id') is not None else '',
            user_id=str(data['user_id']) if data.get('user_id') is not None else '',
            timestamp=timestamp,
            intensity=coerce_int(data.get('intensity'), 'intensity', required=True),
            trigger=data.get('trigger'),
            resisted=coerce_bool(data.get('resisted'), 'resisted'),
            duration_minutes=coerce_int(data.get('duration_minutes'), 'duration_minutes'),
            location=optional_text(data.get('location')),
            mood_before=coerce_int(data.get('mood_before'), 'mood_before'),
            notes=optional_text(data.get('notes')),
            intervention_outcome=outcome,
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'user_id': self.user_id,
            'timestamp': self.timestamp.isoformat(),
            'intensity': self.intensity,
            'trigger': self.trigger,
            'resisted': self.resisted,
            'duration_minutes': self.duration_minutes,
            'location': self.location,
            'mood_before': self.mood_before,
            'notes': self.notes,
            'intervention_outcome': self.intervention_outcome.to_dict() if self.intervention_outcome else None,
        }

    def __repr__(self) -> str:
        return f'<CravingEvent {self.user_id} - {self.timestamp.isoformat()} - {self.trigger} ({self.intensity})>'


def parse_events(records) -> List[CravingEvent]:
    """Parse a batch of plain records, naming the index of a bad one."""
    if records is None:
        return []
    if not isinstance(records, list):
        raise InvalidEventError("'events' must be a list.", 'events')

    events = []
    for index, record in enumerate(records):
        try:
            events.append(CravingEvent.from_dict(record))
        except InvalidEventError as e:
            raise InvalidEventError(f'Event {index}: {e}', e.field)
    return events


def parse_outcomes(records) -> List[InterventionOutcome]:
    if records is None:
        return []
    if not isinstance(records, list):
        raise InvalidEventError("'outcomes' must be a list.", 'outcomes')

    outcomes = []
    for index, record in enumerate(records):
        try:
            outcomes.append(InterventionOutcome.from_dict(record))
        except InvalidEventError as e:
            raise InvalidEventError(f'Outcome {index}: {e}', e.field)
    return outcomes

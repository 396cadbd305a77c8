"""Intervention outcome model definition.
Represents the result of one coping session applied to a craving.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from .errors import InvalidEventError
from .trigger import normalize_trigger
from .validation import (
    clamp_scale,
    coerce_bool,
    coerce_int,
    optional_text,
    parse_timestamp,
)


class InterventionType(str, Enum):
    BREATHING = 'breathing'
    DISTRACT = 'distract'
    REFRAME = 'reframe'
    TIMER = 'timer'
    HOLISTIC = 'holistic'
    OTHER = 'other'

    @classmethod
    def from_label(cls, label) -> 'InterventionType':
        """Resolve a method label; unknown labels map to OTHER."""
        if isinstance(label, cls):
            return label
        if label is None:
            return cls.OTHER
        key = ' '.join(str(label).split()).lower()
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return cls.OTHER


_ALIASES = {
    'distraction': 'distract',
    'reframing': 'reframe',
    'breathing exercise': 'breathing',
    'wait': 'timer',
}


@dataclass(frozen=True)
class InterventionOutcome:
    intervention_type: InterventionType
    successful: bool
    timestamp: datetime
    intensity_before: Optional[int] = None
    intensity_after: Optional[int] = None
    duration_seconds: int = 0
    trigger: Optional[str] = None
    notes: Optional[str] = None
    # Some producers only report the reduction, not the before/after pair.
    reported_reduction: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, 'intervention_type', InterventionType.from_label(self.intervention_type))
        object.__setattr__(self, 'timestamp', parse_timestamp(self.timestamp))
        object.__setattr__(self, 'intensity_before', clamp_scale(self.intensity_before, 'intensity_before'))
        object.__setattr__(self, 'intensity_after', clamp_scale(self.intensity_after, 'intensity_after'))
        if self.duration_seconds is None or self.duration_seconds < 0:
            raise InvalidEventError("'duration_seconds' must be non-negative.", 'duration_seconds')
        if self.trigger is not None:
            object.__setattr__(self, 'trigger', normalize_trigger(self.trigger))

    @property
    def intensity_reduction(self) -> Optional[int]:
        """Before minus after; negative when the craving got worse."""
        if self.intensity_before is not None and self.intensity_after is not None:
            return self.intensity_before - self.intensity_after
        return self.reported_reduction

    @classmethod
    def from_dict(cls, data: dict, default_timestamp: datetime = None) -> 'InterventionOutcome':
        """Build an outcome from a plain record.

        ``default_timestamp`` stands in when the record carries none, which is
        the case for outcomes embedded in older craving logs.
        """
        if not isinstance(data, dict):
            raise InvalidEventError('Intervention outcome must be an object.', 'intervention_outcome')

        raw_timestamp = data.get('timestamp')
        if raw_timestamp in (None, '') and default_timestamp is not None:
            raw_timestamp = default_timestamp

        duration = coerce_int(data.get('duration_seconds', data.get('duration')), 'duration_seconds')

        return cls(
            intervention_type=InterventionType.from_label(
                data.get('intervention_type') or data.get('interventionType')
            ),
            successful=coerce_bool(data.get('successful'), 'successful'),
            timestamp=parse_timestamp(raw_timestamp),
            intensity_before=coerce_int(data.get('intensity_before'), 'intensity_before'),
            intensity_after=coerce_int(data.get('intensity_after'), 'intensity_after'),
            duration_seconds=duration if duration is not None else 0,
            trigger=optional_text(data.get('trigger')),
            notes=optional_text(data.get('notes')),
            reported_reduction=coerce_int(data.get('intensity_reduction'), 'intensity_reduction'),
        )

    def to_dict(self) -> dict:
        return {
            'intervention_type': self.intervention_type.value,
            'successful': self.successful,
            'timestamp': self.timestamp.isoformat(),
            'intensity_before': self.intensity_before,
            'intensity_after': self.intensity_after,
            'intensity_reduction': self.intensity_reduction,
            'duration_seconds': self.duration_seconds,
            'trigger': self.trigger,
            'notes': self.notes,
        }

    def __repr__(self) -> str:
        status = 'success' if self.successful else 'failure'
        return f'<InterventionOutcome {self.intervention_type.value} - {status} - {self.timestamp.isoformat()}>'

"""Derived analytics records.

These are pure outputs recomputed from a user's craving history on demand.
None of them is a source of truth and none is persisted.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .time_bucket import TimeBucket


@dataclass(frozen=True)
class TriggerCount:
    trigger: str
    count: int

    def to_dict(self) -> dict:
        return {'trigger': self.trigger, 'count': self.count}


@dataclass(frozen=True)
class TimeOfDayTriggers:
    time_of_day: TimeBucket
    triggers: List[TriggerCount]

    def to_dict(self) -> dict:
        return {
            'time_of_day': self.time_of_day.value,
            'triggers': [t.to_dict() for t in self.triggers],
        }


@dataclass(frozen=True)
class IntensityPoint:
    date: str  # YYYY-MM-DD
    intensity: float

    def to_dict(self) -> dict:
        return {'date': self.date, 'intensity': self.intensity}


@dataclass(frozen=True)
class StreakState:
    """Both streak concepts: successes in a row and days logged in a row."""

    current: int = 0
    longest: int = 0
    current_days: int = 0
    longest_days: int = 0
    last_date: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'current': self.current,
            'longest': self.longest,
            'current_days': self.current_days,
            'longest_days': self.longest_days,
            'last_date': self.last_date,
        }


@dataclass(frozen=True)
class MethodStats:
    total_used: int = 0
    successes: int = 0
    success_rate: float = 0.0
    average_intensity_reduction: float = 0.0
    eligible: bool = False

    def to_dict(self) -> dict:
        return {
            'total_used': self.total_used,
            'successes': self.successes,
            'success_rate': self.success_rate,
            'average_intensity_reduction': self.average_intensity_reduction,
            'eligible': self.eligible,
        }


@dataclass(frozen=True)
class MethodEffectiveness:
    """Per-method stats overall and cross-tabulated by time of day.

    Keys of both tables are intervention type values in first-seen order.
    """

    overall: Dict[str, MethodStats] = field(default_factory=dict)
    by_time_of_day: Dict[str, Dict[TimeBucket, MethodStats]] = field(default_factory=dict)

    def cell(self, method: str, bucket: TimeBucket) -> MethodStats:
        return self.by_time_of_day.get(method, {}).get(bucket, MethodStats())

    def to_dict(self) -> dict:
        return {
            'overall': {method: stats.to_dict() for method, stats in self.overall.items()},
            'by_time_of_day': {
                method: {bucket.value: stats.to_dict() for bucket, stats in cells.items()}
                for method, cells in self.by_time_of_day.items()
            },
        }


@dataclass(frozen=True)
class CravingAnalytics:
    total_cravings: int = 0
    resisted_cravings: int = 0
    resistance_rate: float = 0.0
    average_intensity: float = 0.0
    common_triggers: List[TriggerCount] = field(default_factory=list)
    triggers_by_time_of_day: List[TimeOfDayTriggers] = field(default_factory=list)
    intensity_trend: List[IntensityPoint] = field(default_factory=list)
    predictions: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'total_cravings': self.total_cravings,
            'resisted_cravings': self.resisted_cravings,
            'resistance_rate': self.resistance_rate,
            'average_intensity': self.average_intensity,
            'common_triggers': [t.to_dict() for t in self.common_triggers],
            'triggers_by_time_of_day': [t.to_dict() for t in self.triggers_by_time_of_day],
            'intensity_trend': [p.to_dict() for p in self.intensity_trend],
            'predictions': [p.to_dict() for p in self.predictions],
        }

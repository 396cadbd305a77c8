"""Prediction records.
Risk assessments per time of day and method recommendations.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .time_bucket import TimeBucket


class RiskLevel(str, Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'


@dataclass(frozen=True)
class RiskWindow:
    time_of_day: TimeBucket
    risk_score: float  # 0.0-1.0, mean intensity / 10
    risk_level: RiskLevel
    top_triggers: List[str]
    recommended_action: str
    sample_size: int = 0

    @property
    def primary_trigger(self) -> Optional[str]:
        return self.top_triggers[0] if self.top_triggers else None

    @property
    def secondary_trigger(self) -> Optional[str]:
        return self.top_triggers[1] if len(self.top_triggers) > 1 else None

    def to_dict(self) -> dict:
        return {
            'time_of_day': self.time_of_day.value,
            'risk_score': self.risk_score,
            'risk_level': self.risk_level.value,
            'top_triggers': list(self.top_triggers),
            'primary_trigger': self.primary_trigger,
            'secondary_trigger': self.secondary_trigger,
            'recommended_action': self.recommended_action,
            'sample_size': self.sample_size,
        }

    def __repr__(self) -> str:
        return f'<RiskWindow {self.time_of_day.value} - {self.risk_level.value} ({self.risk_score:.2f})>'


@dataclass(frozen=True)
class MethodRecommendation:
    method: str
    time_of_day: TimeBucket
    success_rate: float
    total_used: int

    def to_dict(self) -> dict:
        return {
            'method': self.method,
            'time_of_day': self.time_of_day.value,
            'success_rate': self.success_rate,
            'total_used': self.total_used,
        }


@dataclass(frozen=True)
class CravingTimePrediction:
    """A clock hour that has drawn an outsized share of cravings."""

    hour: int  # local hour, 0-23
    count: int
    risk_score: float  # share of all logged cravings, 0.0-1.0
    risk_level: RiskLevel
    recommended_intervention: str

    @property
    def timeframe(self) -> str:
        return f'{self.hour}:00 - {(self.hour + 1) % 24}:00'

    def to_dict(self) -> dict:
        return {
            'hour': self.hour,
            'timeframe': self.timeframe,
            'count': self.count,
            'risk_score': self.risk_score,
            'risk_percentage': round(self.risk_score * 100),
            'risk_level': self.risk_level.value,
            'recommended_intervention': self.recommended_intervention,
        }

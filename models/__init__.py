"""Record models package.

Plain, immutable records for the craving history the engine reads and the
analytics it derives. Each record lives in its own module and is
re-exported here for convenience.
"""

from .errors import InvalidEventError  # noqa: F401
from .time_bucket import TimeBucket, TIME_BUCKETS  # noqa: F401
from .trigger import TriggerCategory, KNOWN_TRIGGERS, normalize_trigger  # noqa: F401
from .intervention import InterventionOutcome, InterventionType  # noqa: F401
from .craving import CravingEvent, parse_events, parse_outcomes  # noqa: F401
from .analytics import (  # noqa: F401
    CravingAnalytics,
    IntensityPoint,
    MethodEffectiveness,
    MethodStats,
    StreakState,
    TimeOfDayTriggers,
    TriggerCount,
)
from .prediction import (  # noqa: F401
    CravingTimePrediction,
    MethodRecommendation,
    RiskLevel,
    RiskWindow,
)

__all__ = [
    "InvalidEventError",
    "TimeBucket",
    "TIME_BUCKETS",
    "TriggerCategory",
    "KNOWN_TRIGGERS",
    "normalize_trigger",
    "InterventionOutcome",
    "InterventionType",
    "CravingEvent",
    "parse_events",
    "parse_outcomes",
    "CravingAnalytics",
    "IntensityPoint",
    "MethodEffectiveness",
    "MethodStats",
    "StreakState",
    "TimeOfDayTriggers",
    "TriggerCount",
    "CravingTimePrediction",
    "MethodRecommendation",
    "RiskLevel",
    "RiskWindow",
]

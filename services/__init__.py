"""Craving analytics and recommendation engine.

This package groups the pure computations over a user's craving history.
Each function takes an in-memory snapshot of events (and, where it needs
one, the current instant) and returns new derived values. Keeping this
logic out of route handlers makes it easy to test and safe to run for
many users at once.
"""

from services.timezone_service import get_time_bucket  # noqa: F401
from services.log_filter_service import filter_events, sort_events  # noqa: F401
from services.craving_service import compute_analytics  # noqa: F401
from services.streak_service import compute_streaks, compute_logging_streak  # noqa: F401
from services.effectiveness_service import (  # noqa: F401
    compute_method_effectiveness,
    rank_methods,
)
from services.predictive_service import (  # noqa: F401
    predict_craving_times,
    predict_risk_windows,
    predict_success_probability,
    recommend_best_method,
)
from services.session_service import (  # noqa: F401
    InterventionSession,
    SessionState,
    SessionStateError,
    start_session,
    update_intensity,
    complete_session,
)


__all__ = [
    "get_time_bucket",
    "filter_events",
    "sort_events",
    "compute_analytics",
    "compute_streaks",
    "compute_logging_streak",
    "compute_method_effectiveness",
    "rank_methods",
    "predict_craving_times",
    "predict_risk_windows",
    "predict_success_probability",
    "recommend_best_method",
    "InterventionSession",
    "SessionState",
    "SessionStateError",
    "start_session",
    "update_intensity",
    "complete_session",
]

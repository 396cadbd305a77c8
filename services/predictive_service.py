"""Predictive Analytics service functions.

These helpers turn a user's craving history into forward-looking guidance:
which times of day are risky, how likely an intervention is to work right
now, and which method to try first. Everything is computed from history;
thresholds are fixed policy, not learned.
"""
import logging
from collections import Counter
from datetime import datetime
from typing import Iterable, List, Optional

from models import (
    CravingEvent,
    CravingTimePrediction,
    InterventionType,
    MethodRecommendation,
    RiskLevel,
    RiskWindow,
    TimeBucket,
    TriggerCategory,
    normalize_trigger,
)
from services.craving_service import count_triggers, group_by_time_of_day
from services.effectiveness_service import (
    best_method_in_bucket,
    compute_method_effectiveness,
)
from services.log_filter_service import events_with_outcomes, outcomes_of
from services.timezone_service import convert_utc_to_user_time, get_time_bucket

logger = logging.getLogger(__name__)

HIGH_RISK_THRESHOLD = 0.4
MEDIUM_RISK_THRESHOLD = 0.2
SIMILAR_INTENSITY_RANGE = 2
# Returned only for an empty craving history.
DEFAULT_SUCCESS_PROBABILITY = 50
MIN_LOGS_FOR_HOURLY_PREDICTION = 5
TOP_RISK_HOURS = 3

DEFAULT_ACTION = 'Use distraction techniques'
RECOMMENDED_ACTIONS = {
    TriggerCategory.STRESS: 'Try a 5-minute breathing exercise',
    TriggerCategory.SOCIAL_SITUATION: 'Plan ahead with mocktails or gum',
    TriggerCategory.BOREDOM: 'Play a quick focus game',
    TriggerCategory.AFTER_MEAL: 'Take a short walk after eating',
}


def classify_risk(risk_score: float) -> RiskLevel:
    if risk_score > HIGH_RISK_THRESHOLD:
        return RiskLevel.HIGH
    if risk_score > MEDIUM_RISK_THRESHOLD:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def get_recommended_action(trigger: Optional[str]) -> str:
    """Fixed coping suggestion for a trigger; unknown triggers get the generic one."""
    if trigger is None:
        return DEFAULT_ACTION
    return RECOMMENDED_ACTIONS.get(TriggerCategory.from_label(trigger), DEFAULT_ACTION)


def predict_risk_windows(events: Iterable[CravingEvent], user_timezone: str = 'UTC') -> List[RiskWindow]:
    """
    Classify each time of day by how intense its cravings have been.

    Only buckets with history produce a window. Windows are ordered by risk
    score, highest first, with ties kept in morning-to-night order.
    """
    windows = []
    for bucket, bucket_events in group_by_time_of_day(events, user_timezone).items():
        if not bucket_events:
            continue

        risk_score = sum(e.intensity for e in bucket_events) / len(bucket_events) / 10
        top_triggers = [t.trigger for t in count_triggers(bucket_events)[:2]]
        windows.append(RiskWindow(
            time_of_day=bucket,
            risk_score=risk_score,
            risk_level=classify_risk(risk_score),
            top_triggers=top_triggers,
            recommended_action=get_recommended_action(top_triggers[0] if top_triggers else None),
            sample_size=len(bucket_events),
        ))

    windows.sort(key=lambda w: w.risk_score, reverse=True)
    return windows


def estimate_initial_intensity(event: CravingEvent, requested_intensity: int) -> int:
    """Best guess of how intense a past craving was when its intervention began.

    Uses the outcome's recorded starting intensity, then the logged craving
    intensity, and only then the intensity being asked about now. The last
    step is an approximation: it assumes the past craving was as strong as
    the current one, which can overstate how similar the two are. It cannot
    be reached while CravingEvent requires an intensity; it stays for records
    whose intensity becomes optional.
    """
    outcome = event.intervention_outcome
    if outcome is not None and outcome.intensity_before is not None:
        return outcome.intensity_before
    if event.intensity is not None:
        return event.intensity
    return requested_intensity


def predict_success_probability(events: Iterable[CravingEvent], trigger: str, intensity: int,
                                bucket: TimeBucket, user_timezone: str = 'UTC') -> int:
    """
    Estimate the chance (in percent) that an intervention works right now.

    Past interventions for the same trigger count as similar when they began
    at an intensity within two points of ``intensity`` or happened in the
    same time of day. Without any similar history the share of all logged
    cravings that ended in a successful intervention is used instead, so a
    history with no interventions at all yields 0. Only an empty history
    gets the neutral default.
    """
    events = list(events)
    bucket = TimeBucket.from_label(bucket)
    wanted = normalize_trigger(trigger)

    if not events:
        return DEFAULT_SUCCESS_PROBABILITY

    attempted = events_with_outcomes(events)

    similar = [
        e for e in attempted
        if e.trigger == wanted and (
            abs(estimate_initial_intensity(e, intensity) - intensity) <= SIMILAR_INTENSITY_RANGE
            or get_time_bucket(e.timestamp, user_timezone) == bucket
        )
    ]

    if not similar:
        logger.debug(f"No similar interventions for trigger {wanted!r}, using overall success rate")
        successful = sum(1 for e in attempted if e.intervention_outcome.successful)
        return round(successful / len(events) * 100)

    successful = sum(1 for e in similar if e.intervention_outcome.successful)
    return round(successful / len(similar) * 100)


def recommend_best_method_detail(events: Iterable[CravingEvent], bucket: TimeBucket,
                                 user_timezone: str = 'UTC') -> Optional[MethodRecommendation]:
    bucket = TimeBucket.from_label(bucket)
    effectiveness = compute_method_effectiveness(outcomes_of(events), user_timezone)
    best = best_method_in_bucket(effectiveness, bucket)
    if best is None:
        return None

    method, stats = best
    return MethodRecommendation(
        method=method,
        time_of_day=bucket,
        success_rate=stats.success_rate,
        total_used=stats.total_used,
    )


def recommend_best_method(events: Iterable[CravingEvent], bucket: TimeBucket,
                          user_timezone: str = 'UTC') -> Optional[str]:
    """Method to try first in this time of day, or None without enough history."""
    recommendation = recommend_best_method_detail(events, bucket, user_timezone)
    return recommendation.method if recommendation else None


def recommend_for_now(events: Iterable[CravingEvent], now: datetime,
                      user_timezone: str = 'UTC') -> Optional[MethodRecommendation]:
    """Best method for the time of day ``now`` falls in."""
    return recommend_best_method_detail(events, get_time_bucket(now, user_timezone), user_timezone)


def get_default_intervention(hour: int) -> InterventionType:
    """Fallback technique for a clock hour with no successful history."""
    if 6 <= hour < 10:
        return InterventionType.BREATHING  # calm start to the day
    if 10 <= hour < 14:
        return InterventionType.DISTRACT
    if 14 <= hour < 18:
        return InterventionType.REFRAME
    if 18 <= hour < 22:
        return InterventionType.HOLISTIC  # wind down
    return InterventionType.TIMER


def get_recommended_intervention(events: Iterable[CravingEvent], hour: int,
                                 user_timezone: str = 'UTC') -> InterventionType:
    """Technique that has worked most often at this local hour."""
    worked = Counter(
        e.intervention_outcome.intervention_type
        for e in events_with_outcomes(events)
        if e.intervention_outcome.successful
        and convert_utc_to_user_time(user_timezone, e.timestamp)[2] == hour
    )
    if not worked:
        return get_default_intervention(hour)
    return worked.most_common(1)[0][0]


def predict_craving_times(events: Iterable[CravingEvent], user_timezone: str = 'UTC') -> List[CravingTimePrediction]:
    """
    Predict the clock hours most likely to bring a craving.

    Needs at least five logged cravings. The three busiest local hours are
    returned, busiest first and earlier hours first on ties, each scored by
    its share of all cravings.
    """
    events = list(events)
    if len(events) < MIN_LOGS_FOR_HOURLY_PREDICTION:
        return []

    hour_counts = Counter(convert_utc_to_user_time(user_timezone, e.timestamp)[2] for e in events)
    busiest = sorted(hour_counts.items(), key=lambda item: (-item[1], item[0]))[:TOP_RISK_HOURS]

    predictions = []
    for hour, count in busiest:
        risk_score = count / len(events)
        predictions.append(CravingTimePrediction(
            hour=hour,
            count=count,
            risk_score=risk_score,
            risk_level=classify_risk(risk_score),
            recommended_intervention=get_recommended_intervention(events, hour, user_timezone).value,
        ))

    logger.debug(f"Predicted {len(predictions)} high-risk hours from {len(events)} cravings")
    return predictions

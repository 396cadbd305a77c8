"""Intervention method effectiveness.

Scores each intervention method by success rate and average intensity
reduction, overall and per time of day. A method only counts as proven in
a time slot once it has been tried there MIN_SAMPLES_FOR_RECOMMENDATION
times; smaller cells are still reported so the numbers stay transparent.
"""
import logging
from collections import Counter, defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from models import (
    CravingEvent,
    InterventionOutcome,
    MethodEffectiveness,
    MethodStats,
    TimeBucket,
    TIME_BUCKETS,
    normalize_trigger,
)
from services.log_filter_service import events_with_outcomes, outcomes_of, sort_outcomes
from services.timezone_service import get_time_bucket

logger = logging.getLogger(__name__)

MIN_SAMPLES_FOR_RECOMMENDATION = 3


def score_outcomes(outcomes: List[InterventionOutcome]) -> MethodStats:
    """Success rate and mean reduction for one group of outcomes.

    Outcomes without a reduction value are left out of the mean rather than
    counted as zero.
    """
    total = len(outcomes)
    if total == 0:
        return MethodStats()

    successes = sum(1 for o in outcomes if o.successful)
    reductions = [o.intensity_reduction for o in outcomes if o.intensity_reduction is not None]
    average_reduction = sum(reductions) / len(reductions) if reductions else 0.0

    return MethodStats(
        total_used=total,
        successes=successes,
        success_rate=successes / total * 100,
        average_intensity_reduction=average_reduction,
        eligible=total >= MIN_SAMPLES_FOR_RECOMMENDATION,
    )


def compute_method_effectiveness(outcomes: Iterable[InterventionOutcome],
                                 user_timezone: str = 'UTC') -> MethodEffectiveness:
    """
    Build the method and method x time-of-day effectiveness tables.

    Args:
        outcomes: Intervention outcomes in any order
        user_timezone: Timezone used to bucket outcome timestamps

    Returns:
        MethodEffectiveness with methods keyed in first-seen order. Every
        method row has all four time buckets, empty ones with zero stats.
    """
    by_method: Dict[str, List[InterventionOutcome]] = defaultdict(list)
    by_cell: Dict[Tuple[str, TimeBucket], List[InterventionOutcome]] = defaultdict(list)

    for outcome in outcomes:
        method = outcome.intervention_type.value
        by_method[method].append(outcome)
        by_cell[(method, get_time_bucket(outcome.timestamp, user_timezone))].append(outcome)

    overall = {method: score_outcomes(group) for method, group in by_method.items()}
    by_time_of_day = {
        method: {bucket: score_outcomes(by_cell.get((method, bucket), [])) for bucket in TIME_BUCKETS}
        for method in by_method
    }

    logger.debug(f"Scored {len(overall)} intervention methods")
    return MethodEffectiveness(overall=overall, by_time_of_day=by_time_of_day)


def _ranking_key(item: Tuple[str, MethodStats]):
    _, stats = item
    return (-stats.success_rate, -stats.total_used)


def rank_methods(outcomes: Iterable[InterventionOutcome],
                 user_timezone: str = 'UTC') -> List[Tuple[str, MethodStats]]:
    """Methods by success rate, then times used, then first seen."""
    effectiveness = compute_method_effectiveness(outcomes, user_timezone)
    return sorted(effectiveness.overall.items(), key=_ranking_key)


def best_method_in_bucket(effectiveness: MethodEffectiveness,
                          bucket: TimeBucket) -> Optional[Tuple[str, MethodStats]]:
    """Highest success rate among proven cells for a bucket.

    A method that never worked is not recommended even if it is proven.
    """
    candidates = [
        (method, cells[bucket])
        for method, cells in effectiveness.by_time_of_day.items()
        if cells[bucket].eligible and cells[bucket].successes > 0
    ]
    if not candidates:
        return None
    return sorted(candidates, key=_ranking_key)[0]


def get_most_effective_method(outcomes: Iterable[InterventionOutcome]) -> Optional[Dict[str, any]]:
    """Best overall method among those used at least three times."""
    ranked = [(m, s) for m, s in rank_methods(outcomes) if s.eligible and s.successes > 0]
    if not ranked:
        return None
    method, stats = ranked[0]
    return {'name': method, 'success_rate': stats.success_rate, 'count': stats.total_used}


def get_overall_success_rate(events: Iterable[CravingEvent]) -> float:
    """Share of logged interventions that worked, in percent."""
    outcomes = outcomes_of(events)
    if not outcomes:
        return 0.0
    return sum(1 for o in outcomes if o.successful) / len(outcomes) * 100


def get_success_rate_by_time_of_day(events: Iterable[CravingEvent],
                                    user_timezone: str = 'UTC') -> Dict[str, float]:
    totals = Counter()
    successes = Counter()
    for event in events_with_outcomes(events):
        bucket = get_time_bucket(event.timestamp, user_timezone)
        totals[bucket] += 1
        if event.intervention_outcome.successful:
            successes[bucket] += 1

    return {
        bucket.value: (successes[bucket] / totals[bucket] * 100) if totals[bucket] else 0.0
        for bucket in TIME_BUCKETS
    }


def get_previously_successful_methods(events: Iterable[CravingEvent], trigger: str,
                                      limit: int = 3) -> List[str]:
    """Methods that have worked most often for this trigger."""
    wanted = normalize_trigger(trigger)
    counts = Counter(
        e.intervention_outcome.intervention_type.value
        for e in events_with_outcomes(events)
        if e.trigger == wanted and e.intervention_outcome.successful
    )
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [method for method, _ in ranked[:limit]]


def get_progress_over_time(outcomes: Iterable[InterventionOutcome]) -> List[Dict[str, any]]:
    """Running success rate after each outcome, oldest first."""
    progress = []
    successes = 0
    for index, outcome in enumerate(sort_outcomes(outcomes, descending=False), start=1):
        if outcome.successful:
            successes += 1
        progress.append({
            'timestamp': outcome.timestamp.isoformat(),
            'success_rate': round(successes / index * 100),
        })
    return progress

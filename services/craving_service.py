"""Craving-related service functions.

These helpers compute descriptive analytics over a user's craving history:
totals, resistance rate, trigger rankings, time-of-day breakdowns and the
daily intensity trend. They read an in-memory snapshot and never write.
"""
import logging
from collections import Counter, defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from models import (
    CravingAnalytics,
    CravingEvent,
    IntensityPoint,
    TimeBucket,
    TimeOfDayTriggers,
    TriggerCount,
    TIME_BUCKETS,
)
from services.log_filter_service import events_in_range
from services.timezone_service import get_time_bucket, get_user_date

logger = logging.getLogger(__name__)


def count_triggers(events: Iterable[CravingEvent]) -> List[TriggerCount]:
    """Trigger frequency table, most frequent first.

    Counter keeps first-seen order and the sort is stable, so equal counts
    stay in the order the triggers first appeared.
    """
    counts = Counter(event.trigger for event in events)
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [TriggerCount(trigger=trigger, count=count) for trigger, count in ranked]


def group_by_time_of_day(events: Iterable[CravingEvent],
                         user_timezone: str = 'UTC') -> Dict[TimeBucket, List[CravingEvent]]:
    """Split events into the four day-parts; every bucket is present."""
    groups = {bucket: [] for bucket in TIME_BUCKETS}
    for event in events:
        groups[get_time_bucket(event.timestamp, user_timezone)].append(event)
    return groups


def get_triggers_by_time_of_day(events: Iterable[CravingEvent],
                                user_timezone: str = 'UTC') -> List[TimeOfDayTriggers]:
    groups = group_by_time_of_day(events, user_timezone)
    return [
        TimeOfDayTriggers(time_of_day=bucket, triggers=count_triggers(groups[bucket]))
        for bucket in TIME_BUCKETS
    ]


def get_intensity_trend(events: Iterable[CravingEvent], user_timezone: str = 'UTC') -> List[IntensityPoint]:
    """Mean intensity per local calendar date, oldest date first."""
    by_date: Dict[str, List[int]] = defaultdict(list)
    for event in events:
        by_date[get_user_date(event.timestamp, user_timezone).isoformat()].append(event.intensity)

    return [
        IntensityPoint(date=day, intensity=sum(values) / len(values))
        for day, values in sorted(by_date.items())
    ]


def get_resistance_rate(events: List[CravingEvent]) -> float:
    if not events:
        return 0.0
    resisted = sum(1 for e in events if e.resisted)
    return resisted / len(events) * 100


def get_average_intensity(events: List[CravingEvent]) -> float:
    if not events:
        return 0.0
    return sum(e.intensity for e in events) / len(events)


def compute_analytics(events: Iterable[CravingEvent],
                      start: Optional[datetime] = None,
                      end: Optional[datetime] = None,
                      user_timezone: str = 'UTC') -> CravingAnalytics:
    """
    Compute the full descriptive analytics report for a date range.

    Args:
        events: The user's craving events
        start: Inclusive start of the range (None for unbounded)
        end: Exclusive end of the range (None for unbounded)
        user_timezone: Timezone used for day-parts and calendar dates

    Returns:
        CravingAnalytics; every field has its zero value when no events match
    """
    from services.predictive_service import predict_risk_windows

    events = events_in_range(events, start, end)
    if not events:
        return CravingAnalytics(
            triggers_by_time_of_day=get_triggers_by_time_of_day([], user_timezone),
        )

    resisted = sum(1 for e in events if e.resisted)
    analytics = CravingAnalytics(
        total_cravings=len(events),
        resisted_cravings=resisted,
        resistance_rate=get_resistance_rate(events),
        average_intensity=get_average_intensity(events),
        common_triggers=count_triggers(events),
        triggers_by_time_of_day=get_triggers_by_time_of_day(events, user_timezone),
        intensity_trend=get_intensity_trend(events, user_timezone),
        predictions=predict_risk_windows(events, user_timezone),
    )
    logger.debug(
        f"Computed analytics over {analytics.total_cravings} cravings "
        f"({len(analytics.common_triggers)} distinct triggers, {len(analytics.intensity_trend)} days)"
    )
    return analytics


def get_intensity_trend_direction(events: Iterable[CravingEvent], user_timezone: str = 'UTC') -> Dict[str, any]:
    """Compare the two halves of the daily trend to label its direction."""
    trend = get_intensity_trend(events, user_timezone)
    if not trend:
        return {'trend': 'stable', 'current_avg': 0, 'change_percentage': 0}

    intensities = [point.intensity for point in trend]
    change_percentage = 0.0
    direction = 'stable'
    if len(intensities) >= 2:
        half = len(intensities) // 2
        first_half_avg = sum(intensities[:half]) / half
        second_half_avg = sum(intensities[half:]) / (len(intensities) - half)
        change_percentage = ((second_half_avg - first_half_avg) / first_half_avg) * 100 if first_half_avg > 0 else 0

        if change_percentage > 10:
            direction = 'increasing'
        elif change_percentage < -10:
            direction = 'decreasing'

    return {
        'trend': direction,
        'current_avg': round(sum(intensities) / len(intensities), 1),
        'change_percentage': round(change_percentage, 1),
    }


def get_mood_correlation(events: Iterable[CravingEvent]) -> Dict[str, any]:
    """Analyze correlation between mood and cravings."""
    with_mood = [e for e in events if e.mood_before is not None]
    if not with_mood:
        return {'correlation': 'insufficient_data', 'avg_mood_before': 0, 'avg_intensity': 0}

    avg_mood = sum(e.mood_before for e in with_mood) / len(with_mood)
    avg_intensity = sum(e.intensity for e in with_mood) / len(with_mood)

    if avg_mood < 4:  # Low mood
        correlation = 'low_mood_high_cravings' if avg_intensity > 6 else 'low_mood_manageable_cravings'
    elif avg_mood > 7:  # High mood
        correlation = 'high_mood_low_cravings' if avg_intensity < 5 else 'high_mood_high_cravings'
    else:
        correlation = 'neutral_mood'

    return {
        'correlation': correlation,
        'avg_mood_before': round(avg_mood, 1),
        'avg_intensity': round(avg_intensity, 1),
    }

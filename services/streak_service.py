"""Streak tracking.

Two streaks are tracked: successful interventions in a row, and consecutive
calendar days with at least one entry.
"""
import logging
from datetime import datetime, timedelta
from typing import Iterable, List, Tuple

from models import CravingEvent, InterventionOutcome, StreakState
from services.log_filter_service import sort_outcomes
from services.timezone_service import get_user_date

logger = logging.getLogger(__name__)


def compute_intervention_streak(outcomes: Iterable[InterventionOutcome]) -> Tuple[int, int]:
    """
    Successful-interventions-in-a-row streak.

    Returns:
        Tuple of (current, longest). Current is the run of successes ending
        at the most recent outcome; longest is the best run anywhere.
    """
    # Ties keep input order, so of two outcomes with the same timestamp the
    # one appended later counts as the newer.
    chronological = sort_outcomes(outcomes, descending=False)

    current = 0
    for outcome in reversed(chronological):
        if not outcome.successful:
            break
        current += 1

    longest = 0
    running = 0
    for outcome in chronological:
        if outcome.successful:
            running += 1
            longest = max(longest, running)
        else:
            running = 0

    return current, longest


def compute_day_streak(timestamps: Iterable[datetime], now: datetime,
                       user_timezone: str = 'UTC') -> Tuple[int, int, str]:
    """
    Consecutive-calendar-days streak.

    The current streak counts back from today, or from yesterday when
    nothing has been logged yet today; any older gap resets it to 0.

    Returns:
        Tuple of (current, longest, last_date) where last_date is the most
        recent local date with an entry (ISO string) or None.
    """
    days = sorted({get_user_date(ts, user_timezone) for ts in timestamps})
    if not days:
        return 0, 0, None

    one_day = timedelta(days=1)
    today = get_user_date(now, user_timezone)
    latest = days[-1]

    current = 0
    if today - latest <= one_day:
        present = set(days)
        check = latest
        while check in present:
            current += 1
            check -= one_day

    longest = 1
    running = 1
    for previous, day in zip(days, days[1:]):
        if day - previous == one_day:
            running += 1
            longest = max(longest, running)
        else:
            running = 1

    return current, longest, latest.isoformat()


def compute_streaks(outcomes: Iterable[InterventionOutcome], now: datetime,
                    user_timezone: str = 'UTC') -> StreakState:
    """Both streaks over a list of intervention outcomes."""
    outcomes: List[InterventionOutcome] = list(outcomes)
    current, longest = compute_intervention_streak(outcomes)
    current_days, longest_days, last_date = compute_day_streak(
        (o.timestamp for o in outcomes), now, user_timezone
    )
    logger.debug(f"Streaks over {len(outcomes)} outcomes: current={current}, longest={longest}, days={current_days}")
    return StreakState(
        current=current,
        longest=longest,
        current_days=current_days,
        longest_days=longest_days,
        last_date=last_date,
    )


def compute_logging_streak(events: Iterable[CravingEvent], now: datetime,
                           user_timezone: str = 'UTC') -> StreakState:
    """Days-in-a-row streak of logging cravings at all."""
    current_days, longest_days, last_date = compute_day_streak(
        (e.timestamp for e in events), now, user_timezone
    )
    return StreakState(current_days=current_days, longest_days=longest_days, last_date=last_date)

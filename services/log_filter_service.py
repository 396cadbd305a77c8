"""Filtered and sorted views over a craving history.

All helpers return new lists and leave their input untouched.
"""
from datetime import date, datetime
from typing import Iterable, List, Optional

from models import CravingEvent, InterventionOutcome, normalize_trigger
from models.validation import parse_timestamp
from services.timezone_service import get_user_date

SORT_KEYS = ('timestamp', 'intensity')


def filter_events(events: Iterable[CravingEvent],
                  trigger: Optional[str] = None,
                  resisted: Optional[bool] = None,
                  start: Optional[datetime] = None,
                  end: Optional[datetime] = None) -> List[CravingEvent]:
    """
    Filter events by trigger, outcome and time range.

    Args:
        events: Craving events in any order
        trigger: Keep only this trigger (compared after normalization)
        resisted: Keep only resisted (True) or given-in (False) cravings
        start: Inclusive lower bound
        end: Exclusive upper bound

    Returns:
        Matching events in their original relative order
    """
    wanted_trigger = normalize_trigger(trigger) if trigger is not None else None
    start = parse_timestamp(start, 'start') if start is not None else None
    end = parse_timestamp(end, 'end') if end is not None else None

    return [
        event for event in events
        if (wanted_trigger is None or event.trigger == wanted_trigger)
        and (resisted is None or event.resisted == resisted)
        and (start is None or event.timestamp >= start)
        and (end is None or event.timestamp < end)
    ]


def events_in_range(events: Iterable[CravingEvent],
                    start: Optional[datetime],
                    end: Optional[datetime]) -> List[CravingEvent]:
    return filter_events(events, start=start, end=end)


def events_for_date(events: Iterable[CravingEvent], target_date: date,
                    user_timezone: str = 'UTC') -> List[CravingEvent]:
    """Events whose local calendar date is ``target_date``."""
    return [e for e in events if get_user_date(e.timestamp, user_timezone) == target_date]


def sort_events(events: Iterable[CravingEvent], key: str = 'timestamp',
                descending: bool = True) -> List[CravingEvent]:
    """Sort events by timestamp or intensity.

    Python's sort is stable, so events with equal keys keep their input
    order in both directions. Unknown keys fall back to timestamp.
    """
    if key not in SORT_KEYS:
        key = 'timestamp'
    return sorted(events, key=lambda e: getattr(e, key), reverse=descending)


def outcomes_of(events: Iterable[CravingEvent]) -> List[InterventionOutcome]:
    """The outcomes attached to events, in event order."""
    return [e.intervention_outcome for e in events if e.intervention_outcome is not None]


def events_with_outcomes(events: Iterable[CravingEvent]) -> List[CravingEvent]:
    return [e for e in events if e.intervention_outcome is not None]


def sort_outcomes(outcomes: Iterable[InterventionOutcome],
                  descending: bool = True) -> List[InterventionOutcome]:
    return sorted(outcomes, key=lambda o: o.timestamp, reverse=descending)

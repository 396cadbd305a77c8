"""Craving trigger labels.

Triggers are free text in the UI, so the same situation can arrive as
"Stress", " stress " or "STRESS". Labels are normalized once when an event
is created and then grouped by exact string. ``TriggerCategory`` names the
common triggers; anything else is ``CUSTOM`` and keeps its own label.
"""
import re
from enum import Enum
from typing import Optional

DEFAULT_TRIGGER = 'other'

_WHITESPACE = re.compile(r'\s+')


def normalize_trigger(label: Optional[str]) -> str:
    """Lower-case a trigger label and collapse its whitespace."""
    if label is None:
        return DEFAULT_TRIGGER
    normalized = _WHITESPACE.sub(' ', str(label)).strip().lower()
    return normalized or DEFAULT_TRIGGER


class TriggerCategory(str, Enum):
    STRESS = 'stress'
    SOCIAL_SITUATION = 'social situation'
    BOREDOM = 'boredom'
    AFTER_MEAL = 'after meal'
    ALCOHOL = 'alcohol'
    COFFEE = 'coffee'
    DRIVING = 'driving'
    WORK_BREAK = 'work break'
    MORNING_ROUTINE = 'morning routine'
    EMOTIONAL_DISTRESS = 'emotional distress'
    SEEING_OTHERS_SMOKE = 'seeing others smoke'
    SMELL_OF_SMOKE = 'smell of smoke'
    ARGUMENT = 'argument'
    CELEBRATION = 'celebration'
    HABIT = 'habit'
    OTHER = 'other'
    CUSTOM = 'custom'

    @classmethod
    def from_label(cls, label: Optional[str]) -> 'TriggerCategory':
        normalized = normalize_trigger(label)
        for category in cls:
            if category is not cls.CUSTOM and category.value == normalized:
                return category
        return cls.CUSTOM


KNOWN_TRIGGERS = tuple(c.value for c in TriggerCategory if c is not TriggerCategory.CUSTOM)

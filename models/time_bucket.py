"""Day-part buckets used for temporal pattern analysis."""
from enum import Enum


class TimeBucket(str, Enum):
    MORNING = 'morning'
    AFTERNOON = 'afternoon'
    EVENING = 'evening'
    NIGHT = 'night'

    @classmethod
    def from_hour(cls, hour: int) -> 'TimeBucket':
        """Map a local hour of day (0-23) to its bucket."""
        if not 0 <= hour <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {hour}")
        if 5 <= hour < 12:
            return cls.MORNING
        if 12 <= hour < 17:
            return cls.AFTERNOON
        if 17 <= hour < 22:
            return cls.EVENING
        return cls.NIGHT

    @classmethod
    def from_label(cls, label) -> 'TimeBucket':
        if isinstance(label, cls):
            return label
        try:
            return cls(str(label).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown time of day: {label!r}")


# Display order; also the order ties are resolved in.
TIME_BUCKETS = (TimeBucket.MORNING, TimeBucket.AFTERNOON, TimeBucket.EVENING, TimeBucket.NIGHT)

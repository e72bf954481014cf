"""
Common Value Objects

Value objects used across the scheduling domains:
- TimeRange: A half-open [start, end) interval of timezone-aware instants,
  the shape of every booking, visit occurrence and calendar window.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from shared.domain.base import ValueObject


@dataclass(frozen=True)
class TimeRange(ValueObject):
    """
    Time range value object

    Represents an interval from start (inclusive) to end (exclusive).
    Both ends must be timezone-aware, and end must be strictly after start.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("TimeRange requires timezone-aware datetimes")
        if self.start >= self.end:
            raise ValueError(f"Start ({self.start.isoformat()}) must be before end ({self.end.isoformat()})")

    @classmethod
    def starting_at(cls, start: datetime, duration: timedelta) -> 'TimeRange':
        """Build a range of the given duration beginning at start"""
        return cls(start, start + duration)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps_with(self, other: 'TimeRange') -> bool:
        """
        Check if this range overlaps with another

        Note: end is exclusive, so back-to-back ranges don't overlap.

        Examples:
            - [10:00, 11:00) overlaps with [10:30, 11:30) -> True
            - [10:00, 11:00) overlaps with [09:00, 10:00) -> False (adjacent)
        """
        if not isinstance(other, TimeRange):
            raise TypeError("Can only check overlap with another TimeRange")

        # Overlap formula: start1 < end2 AND end1 > start2
        return (self.start < other.end and
                self.end > other.start)

    def contains(self, moment: datetime) -> bool:
        """Check if an instant falls within this range (end exclusive)"""
        return self.start <= moment < self.end

    def __str__(self):
        return f"{self.start.isoformat()} - {self.end.isoformat()}"

    def __repr__(self):
        return f"TimeRange({self.start.isoformat()}, {self.end.isoformat()})"

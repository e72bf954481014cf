"""
Weekend Rota Aggregate

Holds the Saturday and Sunday shifts of one weekend. Shifts of the same day
must not overlap (half-open, so 9 AM - 1 PM and 1 PM - 5 PM is fine);
different caretakers on the same day are still checked against each other
because the rota covers one building.
"""

from dataclasses import dataclass, field
from datetime import date, time, timedelta, timezone
from typing import Any, Dict, List, Optional

from shared.domain.base import Aggregate, ValueObject
from shared.domain.dates import combine_local, format_clock_range
from shared.domain.value_objects import TimeRange
from apps.caretakers.events import WeekendAssignmentsSaved

SATURDAY = 'saturday'
SUNDAY = 'sunday'
WEEKEND_DAYS = (SATURDAY, SUNDAY)


def weekend_saturday(day: date) -> date:
    """
    Saturday of the weekend a date belongs to

    Raises:
        ValueError: If day is a weekday
    """
    if day.weekday() == 5:
        return day
    if day.weekday() == 6:
        return day - timedelta(days=1)
    raise ValueError(f"{day.isoformat()} is not a Saturday or Sunday")


@dataclass(frozen=True)
class Shift(ValueObject):
    caretaker_id: Any
    start_time: time
    end_time: time
    notes: Optional[str] = None
    id: Any = None

    def period_on(self, day: date) -> TimeRange:
        # Shifts are compared on one fixed day, the zone does not matter
        return TimeRange(combine_local(day, self.start_time, timezone.utc),
                         combine_local(day, self.end_time, timezone.utc))


@dataclass(eq=False)
class WeekendRota(Aggregate):
    saturday: date = None
    shifts: Dict[str, List[Shift]] = field(default_factory=lambda: {day: [] for day in WEEKEND_DAYS})

    def validate(self) -> Dict[str, str]:
        """Return {day: message} for days with an invalid or overlapping shift"""
        errors = {}
        for day in WEEKEND_DAYS:
            message = self._day_error(self.shifts.get(day, []))
            if message:
                errors[day] = f"{day.capitalize()}: {message}"
        return errors

    def _day_error(self, shifts: List[Shift]) -> Optional[str]:
        for shift in shifts:
            if shift.end_time <= shift.start_time:
                return f"End time must be after start time ({format_clock_range(shift.start_time, shift.end_time)})"
        for index, first in enumerate(shifts):
            for second in shifts[index + 1:]:
                if first.period_on(self.saturday).overlaps_with(second.period_on(self.saturday)):
                    return (
                        f"Time overlap detected between "
                        f"{format_clock_range(first.start_time, first.end_time)} and "
                        f"{format_clock_range(second.start_time, second.end_time)}"
                    )
        return None

    def record_saved(self, *, updated: int, created: int, removed: int) -> None:
        self.add_event(WeekendAssignmentsSaved(
            aggregate_id=self.id,
            weekend_start_date=self.saturday,
            updated=updated,
            created=created,
            removed=removed,
        ))

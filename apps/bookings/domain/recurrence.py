"""
Recurrence Generator

Turns a base event and a recurrence rule into the concrete occurrences of a
series. The generator is pure: identical inputs always give identical
output and the base range is never modified.

Rules:
- The first occurrence is always the base itself, in every mode.
- Every occurrence keeps the base duration.
- The bound (rule end date, or the caller-supplied cap) is exclusive:
  nothing starts at or after it.
- Arithmetic is wall-clock arithmetic in the timezone of base.start, so a
  09:00 meeting stays at 09:00 local time across DST changes.
- Monthly steps clamp to the last day of shorter months and are always
  computed from the base (Jan 31 -> Feb 29 -> Mar 31, never Mar 29).
"""

import calendar
import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import ClassVar, Iterator, List

from shared.domain.base import ValueObject
from shared.domain.value_objects import TimeRange


class RecurrenceType(Enum):
    """Recurrence modes supported by the booking and visit forms"""
    NONE = 'none'
    DAILY = 'daily'
    WEEKLY = 'weekly'
    MONTHLY = 'monthly'


class Weekday(Enum):
    """Weekdays, ordered like datetime.weekday() (Monday = 0)"""
    MONDAY = 'monday'
    TUESDAY = 'tuesday'
    WEDNESDAY = 'wednesday'
    THURSDAY = 'thursday'
    FRIDAY = 'friday'
    SATURDAY = 'saturday'
    SUNDAY = 'sunday'

    @property
    def index(self) -> int:
        return list(Weekday).index(self)

    @classmethod
    def parse(cls, value) -> 'Weekday':
        """Accept a Weekday, a weekday name ("monday", "Mon") or a weekday() index"""
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return list(cls)[value]
        name = str(value).strip().lower()
        for day in cls:
            if day.value == name or day.value[:3] == name:
                return day
        raise ValueError(f"Unknown weekday {value!r}")


@dataclass(frozen=True)
class RecurrenceRule(ValueObject):
    """
    Recurrence descriptor persisted with every occurrence of a series

    Stored as structured, versioned JSON (see to_dict). days_of_week is only
    meaningful for weekly rules.
    """
    SCHEMA_VERSION: ClassVar[int] = 1

    type: RecurrenceType = RecurrenceType.NONE
    interval: int = 1
    days_of_week: frozenset = field(default_factory=frozenset)
    end_date: datetime | None = None

    def __post_init__(self):
        # Normalise loose inputs so equality and hashing are by value
        object.__setattr__(self, 'type', RecurrenceType(self.type))
        object.__setattr__(
            self, 'days_of_week', frozenset(Weekday.parse(day) for day in self.days_of_week)
        )

        if isinstance(self.interval, bool) or not isinstance(self.interval, int):
            raise ValueError("Recurrence interval must be an integer")
        if self.interval < 1:
            raise ValueError("Recurrence interval must be at least 1")
        if self.days_of_week and self.type is not RecurrenceType.WEEKLY:
            raise ValueError("Days of week can only be used with weekly recurrence")
        if self.end_date is not None and self.end_date.tzinfo is None:
            raise ValueError("Recurrence end date must be timezone-aware")

    @classmethod
    def none(cls) -> 'RecurrenceRule':
        return cls()

    @property
    def is_recurring(self) -> bool:
        return self.type is not RecurrenceType.NONE

    @property
    def sorted_days(self) -> List[Weekday]:
        return sorted(self.days_of_week, key=lambda day: day.index)

    def to_dict(self) -> dict | None:
        """Structured form stored in recurrence_pattern (None for one-off events)"""
        if not self.is_recurring:
            return None
        return {
            'version': self.SCHEMA_VERSION,
            'type': self.type.value,
            'interval': self.interval,
            'days_of_week': [day.value for day in self.sorted_days],
            'end_date': self.end_date.isoformat() if self.end_date else None,
        }

    @classmethod
    def from_dict(cls, data) -> 'RecurrenceRule':
        """
        Load a stored recurrence descriptor

        Accepts the versioned structure written by to_dict, plus the legacy
        unversioned camelCase blobs ({"type": "bi-weekly", "endDate": ...}),
        which may also arrive as a JSON string.

        Raises:
            ValueError: On unknown versions, types or malformed values
        """
        if data in (None, '', {}):
            return cls.none()
        if isinstance(data, str):
            data = json.loads(data)
        if not isinstance(data, dict):
            raise ValueError("Recurrence pattern must be an object")

        version = data.get('version', 0)
        if version not in (0, cls.SCHEMA_VERSION):
            raise ValueError(f"Unsupported recurrence pattern version {version!r}")

        raw_type = data.get('type') or RecurrenceType.NONE.value
        interval = data.get('interval') or 1
        if raw_type == 'bi-weekly':
            raw_type, interval = RecurrenceType.WEEKLY.value, 2 * interval

        days = data.get('days_of_week', data.get('daysOfWeek')) or []
        raw_end = data.get('end_date', data.get('endDate'))
        end_date = datetime.fromisoformat(raw_end.replace('Z', '+00:00')) if raw_end else None

        try:
            rule_type = RecurrenceType(raw_type)
        except ValueError:
            raise ValueError(f"Unknown recurrence type {raw_type!r}") from None

        # Legacy rows carry daysOfWeek whatever the type
        if version == 0 and rule_type is not RecurrenceType.WEEKLY:
            days = []

        return cls(
            type=rule_type,
            interval=int(interval),
            days_of_week=frozenset(days),
            end_date=end_date,
        )


def add_months(moment: datetime, months: int) -> datetime:
    """
    Calendar month arithmetic with end-of-month clamping

    add_months(Jan 31, 1) -> Feb 29 (leap year) / Feb 28
    """
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def iter_occurrences(
    base: TimeRange,
    rule: RecurrenceRule,
    *,
    cap: datetime | None = None,
) -> Iterator[TimeRange]:
    """
    Lazily enumerate the occurrences of a series

    Args:
        base: The first occurrence as entered on the form
        rule: Recurrence descriptor
        cap: Bound used when the rule has no end date (exclusive)

    Raises:
        ValueError: If a recurring rule has neither an end date nor a cap,
            or the bound is not after the base start
    """
    if not rule.is_recurring:
        return iter((base,))

    bound = rule.end_date or cap
    if bound is None:
        raise ValueError("A recurring series needs an end date or a cap")
    if bound <= base.start:
        raise ValueError("Recurrence end must be after the first occurrence")

    return _walk(base, rule, bound)


def _walk(base: TimeRange, rule: RecurrenceRule, bound: datetime) -> Iterator[TimeRange]:
    duration = base.duration
    yield base

    if rule.type is RecurrenceType.WEEKLY and rule.days_of_week:
        selected = {day.index for day in rule.days_of_week}
        offset = 0
        while True:
            offset += 1
            if offset % 7 == 0:
                # Completed a 7-day block, skip the weeks in between
                offset += (rule.interval - 1) * 7
            start = base.start + timedelta(days=offset)
            if start >= bound:
                return
            if start.weekday() in selected:
                yield TimeRange.starting_at(start, duration)

    step = 1
    while True:
        if rule.type is RecurrenceType.DAILY:
            start = base.start + timedelta(days=step * rule.interval)
        elif rule.type is RecurrenceType.WEEKLY:
            start = base.start + timedelta(weeks=step * rule.interval)
        else:
            start = add_months(base.start, step * rule.interval)
        if start >= bound:
            return
        yield TimeRange.starting_at(start, duration)
        step += 1


def generate_occurrences(
    base: TimeRange,
    rule: RecurrenceRule,
    *,
    cap: datetime | None = None,
) -> List[TimeRange]:
    """Materialise iter_occurrences into a list"""
    return list(iter_occurrences(base, rule, cap=cap))

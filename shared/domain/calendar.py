"""
Calendar windows

The list endpoints fetch a window of reservations around an anchor date.
Which window a view covers, and which weekday a week starts on, are
explicit parameters here rather than being recomputed by every consumer.
"""

from datetime import date, time, timedelta, tzinfo

from shared.domain.dates import combine_local
from shared.domain.value_objects import TimeRange

DAY = 'day'
WEEK = 'week'
MONTH = 'month'
VIEWS = (DAY, WEEK, MONTH)


def start_of_week(day: date, week_starts_on: int = 0) -> date:
    """Return the first day of the week containing day (0 = Monday ... 6 = Sunday)"""
    if not 0 <= week_starts_on <= 6:
        raise ValueError("week_starts_on must be between 0 (Monday) and 6 (Sunday)")
    return day - timedelta(days=(day.weekday() - week_starts_on) % 7)


def _first_of_next_month(day: date) -> date:
    if day.month == 12:
        return date(day.year + 1, 1, 1)
    return date(day.year, day.month + 1, 1)


def calendar_window(view: str, anchor: date, *, tz: tzinfo, week_starts_on: int = 0) -> TimeRange:
    """
    Compute the half-open window a calendar view displays

    - day: local midnight of anchor to the next midnight
    - week: the full week containing anchor
    - month: the month containing anchor, extended to full weeks

    Raises:
        ValueError: If the view is unknown
    """
    if view == DAY:
        first, last = anchor, anchor + timedelta(days=1)
    elif view == WEEK:
        first = start_of_week(anchor, week_starts_on)
        last = first + timedelta(days=7)
    elif view == MONTH:
        month_start = anchor.replace(day=1)
        month_end = _first_of_next_month(anchor) - timedelta(days=1)
        first = start_of_week(month_start, week_starts_on)
        last = start_of_week(month_end, week_starts_on) + timedelta(days=7)
    else:
        raise ValueError(f"Unknown calendar view {view!r}, expected one of {', '.join(VIEWS)}")

    return TimeRange(combine_local(first, time.min, tz), combine_local(last, time.min, tz))

"""
Date and clock helpers

Visit "date-only" fields are stored as instants pinned to midday UTC so that
converting them to any facility timezone never moves them to another day.
"""

import re
from datetime import date, datetime, time, timezone, tzinfo

MIDDAY_UTC_HOUR = 12

_CLOCK_RE = re.compile(r'^([01]?\d|2[0-3]):([0-5]\d)(?::([0-5]\d))?$')


def pin_to_midday_utc(day: date, hour: int = MIDDAY_UTC_HOUR) -> datetime:
    """Return the instant used to store a date-only value"""
    return datetime(day.year, day.month, day.day, hour, 0, tzinfo=timezone.utc)


def pinned_date(value: datetime) -> date:
    """Inverse of pin_to_midday_utc: recover the calendar date of a stored instant"""
    if value.tzinfo is None:
        return value.date()
    return value.astimezone(timezone.utc).date()


def combine_local(day: date, clock: time, tz: tzinfo) -> datetime:
    """Attach a wall-clock time and facility timezone to a calendar date"""
    return datetime.combine(day, clock.replace(tzinfo=None)).replace(tzinfo=tz)


def parse_clock(value: str | time) -> time:
    """
    Parse an "HH:MM" (or "HH:MM:SS") clock string

    Raises:
        ValueError: If the string is not a valid 24h clock time
    """
    if isinstance(value, time):
        return value
    match = _CLOCK_RE.match(str(value).strip())
    if not match:
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    hours, minutes, seconds = match.groups()
    return time(int(hours), int(minutes), int(seconds or 0))


def format_clock(value: time | datetime) -> str:
    """
    Format a clock time without ":00" on the hour

    9:00 -> "9 AM", 13:30 -> "1:30 PM"
    """
    hour12 = value.hour % 12 or 12
    suffix = 'AM' if value.hour < 12 else 'PM'
    if value.minute == 0:
        return f"{hour12} {suffix}"
    return f"{hour12}:{value.minute:02d} {suffix}"


def format_clock_range(start: time | datetime, end: time | datetime) -> str:
    return f"{format_clock(start)} - {format_clock(end)}"

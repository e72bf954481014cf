"""Tests for date helpers and calendar windows."""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from unittest import TestCase
from zoneinfo import ZoneInfo

from shared.domain.calendar import DAY, MONTH, WEEK, calendar_window, start_of_week
from shared.domain.dates import combine_local, format_clock, parse_clock, pin_to_midday_utc, pinned_date

NEW_YORK = ZoneInfo("America/New_York")
AUCKLAND = ZoneInfo("Pacific/Auckland")


class DateHelperTests(TestCase):
    def test_pinned_dates_round_trip(self) -> None:
        pinned = pin_to_midday_utc(date(2030, 3, 15))

        self.assertEqual(pinned, datetime(2030, 3, 15, 12, tzinfo=timezone.utc))
        self.assertEqual(pinned.astimezone(NEW_YORK).date(), date(2030, 3, 15))
        self.assertEqual(pinned_date(pinned.astimezone(AUCKLAND)), date(2030, 3, 15))

    def test_parse_clock(self) -> None:
        self.assertEqual(parse_clock("9:05"), time(9, 5))
        self.assertEqual(parse_clock("17:30:15"), time(17, 30, 15))
        with self.assertRaises(ValueError):
            parse_clock("5pm")

    def test_format_clock_drops_zero_minutes(self) -> None:
        self.assertEqual(format_clock(time(0, 0)), "12 AM")
        self.assertEqual(format_clock(time(12, 0)), "12 PM")
        self.assertEqual(format_clock(time(13, 30)), "1:30 PM")

    def test_combine_local(self) -> None:
        moment = combine_local(date(2030, 7, 1), time(9), NEW_YORK)

        self.assertEqual(moment.utcoffset().total_seconds(), -4 * 3600)


class CalendarWindowTests(TestCase):
    def test_day(self) -> None:
        window = calendar_window(DAY, date(2030, 1, 9), tz=NEW_YORK)

        self.assertEqual(window.start, datetime(2030, 1, 9, tzinfo=NEW_YORK))
        self.assertEqual(window.end, datetime(2030, 1, 10, tzinfo=NEW_YORK))

    def test_week_respects_first_weekday(self) -> None:
        monday_window = calendar_window(WEEK, date(2030, 1, 9), tz=NEW_YORK)
        sunday_window = calendar_window(WEEK, date(2030, 1, 9), tz=NEW_YORK, week_starts_on=6)

        self.assertEqual(monday_window.start.date(), date(2030, 1, 7))
        self.assertEqual(sunday_window.start.date(), date(2030, 1, 6))
        self.assertEqual(sunday_window.end.date(), date(2030, 1, 13))

    def test_month_is_extended_to_full_weeks(self) -> None:
        window = calendar_window(MONTH, date(2030, 1, 20), tz=NEW_YORK)

        self.assertEqual(window.start.date(), date(2029, 12, 31))
        self.assertEqual(window.end.date(), date(2030, 2, 4))

    def test_unknown_view(self) -> None:
        with self.assertRaises(ValueError):
            calendar_window("year", date(2030, 1, 1), tz=NEW_YORK)

    def test_start_of_week(self) -> None:
        self.assertEqual(start_of_week(date(2030, 1, 6)), date(2029, 12, 31))
        with self.assertRaises(ValueError):
            start_of_week(date(2030, 1, 6), 7)

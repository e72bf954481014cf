"""Tests for weekend rota validation and saving."""

from __future__ import annotations

from datetime import date, time

from django.test import TestCase

from apps.caretakers.domain import Shift, WeekendRota, weekend_saturday
from apps.caretakers.events import WeekendAssignmentsSaved
from apps.caretakers.services import list_weekend_assignments, save_weekend_assignments
from shared.application import tables
from shared.application.message_bus import MessageBus
from shared.domain.exceptions import SubmissionValidationError
from shared.infrastructure.memory import InMemoryTableClient

SATURDAY = date(2030, 1, 5)
SUNDAY = date(2030, 1, 6)


class WeekendRotaTests(TestCase):
    def _rota(self, *shifts: Shift) -> WeekendRota:
        return WeekendRota(saturday=SATURDAY, shifts={"saturday": list(shifts), "sunday": []})

    def test_overlap_between_caretakers_is_reported(self) -> None:
        rota = self._rota(Shift("a", time(9), time(13)), Shift("b", time(12), time(17)))

        self.assertEqual(
            rota.validate(),
            {"saturday": "Saturday: Time overlap detected between 9 AM - 1 PM and 12 PM - 5 PM"},
        )

    def test_adjacent_shifts_are_fine(self) -> None:
        rota = self._rota(Shift("a", time(9), time(13)), Shift("b", time(13), time(17, 30)))

        self.assertEqual(rota.validate(), {})

    def test_end_before_start(self) -> None:
        rota = self._rota(Shift("a", time(14), time(10)))

        self.assertIn("End time must be after start time", rota.validate()["saturday"])

    def test_weekend_saturday(self) -> None:
        self.assertEqual(weekend_saturday(SATURDAY), SATURDAY)
        self.assertEqual(weekend_saturday(SUNDAY), SATURDAY)
        with self.assertRaises(ValueError):
            weekend_saturday(date(2030, 1, 7))


class SaveWeekendAssignmentsTests(TestCase):
    def setUp(self) -> None:
        self.store = InMemoryTableClient({tables.CARETAKERS: [{"name": "Sam"}, {"name": "Alex"}]})
        caretakers = {row["name"]: row for row in self.store.select(tables.CARETAKERS)}
        self.sam = caretakers["Sam"]["id"]
        self.alex = caretakers["Alex"]["id"]

        self.published = []
        self.bus = MessageBus()
        self.bus.register_event_handler(WeekendAssignmentsSaved, self.published.append)

    def _seed(self, caretaker_id, day: str, start: time, end: time) -> dict:
        return self.store.insert_one(
            tables.WEEKEND_ASSIGNMENTS,
            {
                "caretaker_id": caretaker_id,
                "weekend_start_date": SATURDAY,
                "day_of_week": day,
                "start_time": start,
                "end_time": end,
            },
        )

    def test_new_rota_is_stored_on_the_saturday(self) -> None:
        rows = save_weekend_assignments(
            self.store,
            SUNDAY,
            saturday=[{"caretaker_id": self.sam, "start_time": "09:00", "end_time": "13:00"}],
            sunday=[{"caretaker_id": self.alex, "start_time": "10:00", "end_time": "16:00", "notes": "Keys"}],
        )

        self.assertEqual([row["day_of_week"] for row in rows], ["saturday", "sunday"])
        self.assertTrue(all(row["weekend_start_date"] == SATURDAY for row in rows))
        self.assertEqual(rows[1]["notes"], "Keys")
        self.assertEqual(rows[0]["start_time"], time(9))

    def test_rows_are_updated_inserted_and_removed(self) -> None:
        kept = self._seed(self.sam, "saturday", time(9), time(13))
        dropped = self._seed(self.alex, "sunday", time(9), time(13))

        with self.captureOnCommitCallbacks(execute=True):
            rows = save_weekend_assignments(
                self.store,
                SATURDAY,
                saturday=[
                    {"id": kept["id"], "caretaker_id": self.sam, "start_time": "08:00", "end_time": "12:00"},
                    {"caretaker_id": self.alex, "start_time": "12:00", "end_time": "17:00"},
                ],
                bus=self.bus,
            )

        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[0]["id"], kept["id"])
        self.assertEqual(rows[0]["start_time"], time(8))
        self.assertNotIn(dropped["id"], [row["id"] for row in rows])
        event = self.published[0]
        self.assertEqual((event.updated, event.created, event.removed), (1, 1, 1))

    def test_incomplete_rows_are_ignored(self) -> None:
        rows = save_weekend_assignments(
            self.store,
            SATURDAY,
            saturday=[
                {"caretaker_id": self.sam, "start_time": "09:00", "end_time": "13:00"},
                {"caretaker_id": self.alex, "start_time": "", "end_time": "17:00"},
                {"caretaker_id": None, "start_time": "09:00", "end_time": "10:00"},
            ],
        )

        self.assertEqual(len(rows), 1)

    def test_overlap_rejects_the_whole_rota(self) -> None:
        self._seed(self.sam, "saturday", time(9), time(13))

        with self.assertRaises(SubmissionValidationError) as ctx:
            save_weekend_assignments(
                self.store,
                SATURDAY,
                sunday=[
                    {"caretaker_id": self.sam, "start_time": "09:00", "end_time": "13:00"},
                    {"caretaker_id": self.alex, "start_time": "12:30", "end_time": "15:00"},
                ],
            )

        self.assertEqual(set(ctx.exception.errors), {"sunday"})
        self.assertEqual(self.store.count(tables.WEEKEND_ASSIGNMENTS), 1)

    def test_invalid_time(self) -> None:
        with self.assertRaises(SubmissionValidationError) as ctx:
            save_weekend_assignments(
                self.store, SATURDAY, saturday=[{"caretaker_id": self.sam, "start_time": "9am", "end_time": "13:00"}]
            )

        self.assertIn("saturday", ctx.exception.errors)

    def test_unknown_caretaker(self) -> None:
        with self.assertRaises(SubmissionValidationError) as ctx:
            save_weekend_assignments(
                self.store, SATURDAY, saturday=[{"caretaker_id": "ghost", "start_time": "09:00", "end_time": "13:00"}]
            )

        self.assertIn("caretaker_id", ctx.exception.errors)

    def test_stale_assignment_id(self) -> None:
        with self.assertRaises(SubmissionValidationError) as ctx:
            save_weekend_assignments(
                self.store,
                SATURDAY,
                saturday=[{"id": "gone", "caretaker_id": self.sam, "start_time": "09:00", "end_time": "13:00"}],
            )

        self.assertIn("id", ctx.exception.errors)

    def test_weekday_is_rejected(self) -> None:
        with self.assertRaises(SubmissionValidationError) as ctx:
            list_weekend_assignments(self.store, date(2030, 1, 8))

        self.assertIn("weekend_date", ctx.exception.errors)

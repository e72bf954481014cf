"""Tests for the in-memory and Django ORM table clients."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest import TestCase as UnitTestCase
from uuid import UUID

from django.test import TestCase

from apps.bookings.models import Booking
from apps.rooms.models import Room
from shared.application import tables
from shared.domain.exceptions import PersistenceError
from shared.infrastructure.django_tables import DjangoTableClient
from shared.infrastructure.memory import InMemoryTableClient

START = datetime(2030, 1, 7, 9, 0, tzinfo=timezone.utc)


class InMemoryTableClientTests(UnitTestCase):
    def setUp(self) -> None:
        self.client = InMemoryTableClient({
            tables.ROOMS: [{"name": "Board Room", "capacity": 12}, {"name": "Art Studio", "capacity": None}],
        })

    def test_insert_assigns_id_and_created_at(self) -> None:
        row = self.client.insert_one(tables.PARTNERS, {"name": "Riverside School"})

        self.assertIsInstance(row["id"], UUID)
        self.assertIsNotNone(row["created_at"])
        self.assertEqual(self.client.get(tables.PARTNERS, str(row["id"]))["name"], "Riverside School")

    def test_lookups(self) -> None:
        self.assertEqual([r["name"] for r in self.client.select(tables.ROOMS, {"capacity__gte": 10})], ["Board Room"])
        self.assertEqual([r["name"] for r in self.client.select(tables.ROOMS, {"capacity__isnull": True})], ["Art Studio"])
        self.assertEqual([r["name"] for r in self.client.select(tables.ROOMS, {"name__icontains": "studio"})], ["Art Studio"])

    def test_ordering_puts_missing_values_last(self) -> None:
        rows = self.client.select(tables.ROOMS, order_by=("capacity", "name"))

        self.assertEqual([r["name"] for r in rows], ["Board Room", "Art Studio"])

    def test_returned_records_are_copies(self) -> None:
        row = self.client.select(tables.ROOMS)[0]
        row["name"] = "Changed"

        self.assertNotIn("Changed", [r["name"] for r in self.client.select(tables.ROOMS)])

    def test_update_and_delete(self) -> None:
        room = self.client.select(tables.ROOMS, {"name": "Art Studio"})[0]

        updated = self.client.update(tables.ROOMS, room["id"], {"capacity": 20})
        self.client.delete(tables.ROOMS, room["id"])

        self.assertEqual(updated["capacity"], 20)
        self.assertEqual(self.client.count(tables.ROOMS), 1)
        with self.assertRaises(PersistenceError):
            self.client.update(tables.ROOMS, room["id"], {"capacity": 1})

    def test_unknown_table_and_lookup(self) -> None:
        with self.assertRaises(PersistenceError):
            self.client.select("invoices")
        with self.assertRaises(ValueError):
            self.client.select(tables.ROOMS, {"name__regex": "x"})


class DjangoTableClientTests(TestCase):
    def setUp(self) -> None:
        self.client = DjangoTableClient()
        self.room = Room.objects.create(name="Board Room")

    def test_insert_returns_flat_records(self) -> None:
        rows = self.client.insert(tables.BOOKINGS, [
            {"room_id": self.room.id, "title": "Standup", "start_time": START, "end_time": START + timedelta(minutes=15)},
        ])

        self.assertEqual(rows[0]["room_id"], self.room.id)
        self.assertEqual(rows[0]["title"], "Standup")
        self.assertEqual(Booking.objects.get().title, "Standup")

    def test_select_with_range_lookups(self) -> None:
        for offset in (0, 2):
            Booking.objects.create(
                room=self.room, title=f"Day {offset}",
                start_time=START + timedelta(days=offset), end_time=START + timedelta(days=offset, hours=1),
            )

        rows = self.client.select(
            tables.BOOKINGS,
            {"room_id": self.room.id, "start_time__lt": START + timedelta(days=1), "end_time__gt": START},
        )

        self.assertEqual([row["title"] for row in rows], ["Day 0"])

    def test_update_missing_row(self) -> None:
        with self.assertRaises(PersistenceError):
            self.client.update(tables.ROOMS, "7c0b6f1e-5b6a-4d8e-9a51-0c3e2f1d4b7a", {"name": "x"})

    def test_database_errors_become_persistence_errors(self) -> None:
        with self.assertRaises(PersistenceError) as ctx:
            self.client.insert(tables.BOOKINGS, [
                {"room_id": self.room.id, "title": "Backwards", "start_time": START, "end_time": START - timedelta(hours=1)},
            ])

        self.assertTrue(ctx.exception.detail)
        self.assertFalse(Booking.objects.exists())

    def test_unknown_table(self) -> None:
        with self.assertRaises(PersistenceError):
            self.client.select("invoices")

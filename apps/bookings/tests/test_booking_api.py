"""Integration tests for booking API endpoints."""

from __future__ import annotations

from datetime import time, timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.rooms.models import Room
from shared.application.config import facility_timezone
from shared.domain.dates import combine_local


class BookingAPITests(APITestCase):
    """Covers creation, conflicts, calendar windows and deletion."""

    def setUp(self) -> None:
        self.board_room = Room.objects.create(name="Board Room", capacity=12)
        self.art_studio = Room.objects.create(name="Art Studio")
        self.tz = facility_timezone()
        self.day = timezone.localdate() + timedelta(days=3)
        self.list_url = reverse("booking-list")

    def _at(self, hour: int, day=None):
        return combine_local(day or self.day, time(hour, 0), self.tz)

    def _payload(self, **overrides) -> dict:
        payload = {
            "room_ids": [str(self.board_room.id)],
            "title": "Volunteer briefing",
            "authorizer": "Georgina",
            "start": self._at(9).isoformat(),
            "end": self._at(10).isoformat(),
        }
        payload.update(overrides)
        return payload

    def _book(self, room: Room, start_hour: int, end_hour: int, day=None, title: str = "Existing") -> Booking:
        return Booking.objects.create(
            room=room,
            title=title,
            start_time=self._at(start_hour, day),
            end_time=self._at(end_hour, day),
            authorizer="Lesley",
        )

    def test_create_single_booking(self) -> None:
        response = self.client.post(self.list_url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["room_name"], "Board Room")
        self.assertFalse(response.data[0]["is_recurring"])
        self.assertEqual(Booking.objects.count(), 1)

    def test_weekly_series_end_date_is_inclusive(self) -> None:
        payload = self._payload(
            room_ids=[str(self.board_room.id), str(self.art_studio.id)],
            recurrence={"type": "weekly", "end_date": str(self.day + timedelta(days=14))},
        )

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(len(response.data), 6)
        self.assertEqual([item["room_name"] for item in response.data[:3]], ["Art Studio"] * 3)
        series_ids = set(Booking.objects.values_list("series_id", flat=True))
        self.assertEqual(len(series_ids), 1)
        last = Booking.objects.filter(room=self.board_room).order_by("-start_time").first()
        self.assertEqual(timezone.localtime(last.start_time, self.tz).date(), self.day + timedelta(days=14))

    def test_bi_weekly_is_stored_as_weekly_every_two_weeks(self) -> None:
        payload = self._payload(recurrence={"type": "bi-weekly", "end_date": str(self.day + timedelta(days=28))})

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(len(response.data), 3)
        pattern = response.data[0]["recurrence_pattern"]
        self.assertEqual((pattern["type"], pattern["interval"]), ("weekly", 2))

    def test_conflict_rejects_the_whole_submission(self) -> None:
        self._book(self.art_studio, 9, 11, title="Pottery")
        payload = self._payload(room_ids=[str(self.board_room.id), str(self.art_studio.id)])

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(len(response.data["non_field_errors"]), 1)
        self.assertIn("Art Studio already booked", str(response.data["non_field_errors"][0]))
        self.assertEqual(Booking.objects.count(), 1)

    def test_adjacent_booking_is_allowed(self) -> None:
        self._book(self.board_room, 8, 9)

        response = self.client.post(self.list_url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

    def test_missing_fields_are_reported_per_field(self) -> None:
        response = self.client.post(self.list_url, self._payload(room_ids=[], authorizer=""), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("room_ids", response.data)
        self.assertIn("authorizer", response.data)

    def test_days_of_week_need_weekly_recurrence(self) -> None:
        payload = self._payload(
            recurrence={"type": "daily", "days_of_week": ["monday"], "end_date": str(self.day + timedelta(days=7))}
        )

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("recurrence", response.data)

    def test_list_day_window(self) -> None:
        self._book(self.board_room, 9, 10, title="Today")
        self._book(self.board_room, 9, 10, day=self.day + timedelta(days=1), title="Tomorrow")

        response = self.client.get(self.list_url, {"view": "day", "date": str(self.day)})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["title"] for item in response.data], ["Today"])

    def test_list_filtered_by_room(self) -> None:
        self._book(self.board_room, 9, 10, title="Board")
        self._book(self.art_studio, 9, 10, title="Art")

        response = self.client.get(self.list_url, {"room": str(self.art_studio.id)})

        self.assertEqual([item["title"] for item in response.data], ["Art"])

    def test_patch_updates_descriptive_fields_only(self) -> None:
        booking = self._book(self.board_room, 9, 10)
        url = reverse("booking-detail", kwargs={"pk": booking.id})

        response = self.client.patch(url, {"title": "Renamed", "start_time": self._at(15).isoformat()}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        booking.refresh_from_db()
        self.assertEqual(booking.title, "Renamed")
        self.assertEqual(booking.start_time, self._at(9))

    def test_delete_removes_one_occurrence(self) -> None:
        self.client.post(
            self.list_url,
            self._payload(recurrence={"type": "daily", "end_date": str(self.day + timedelta(days=2))}),
            format="json",
        )
        first = Booking.objects.order_by("start_time").first()

        response = self.client.delete(reverse("booking-detail", kwargs={"pk": first.id}))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(Booking.objects.count(), 2)

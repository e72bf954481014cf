"""Integration tests for contractor and guest visit endpoints."""

from __future__ import annotations

from datetime import time, timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.rooms.models import Room
from apps.visits.models import Contractor, ContractorVisit, GuestVisit, Partner
from shared.application.config import facility_timezone
from shared.domain.dates import combine_local, pin_to_midday_utc


class ContractorVisitAPITests(APITestCase):
    def setUp(self) -> None:
        self.room = Room.objects.create(name="Workshop")
        self.day = timezone.localdate() + timedelta(days=2)
        self.list_url = reverse("contractor-visit-list")

    def _payload(self, **overrides) -> dict:
        payload = {
            "visit_date": str(self.day),
            "start_time": "09:00",
            "end_time": "11:30",
            "is_new_owner": True,
            "owner_name": "Bob Smith",
            "owner_type": "volunteer",
            "purpose": "Garden",
            "authorizer": "Elizabeth",
        }
        payload.update(overrides)
        return payload

    def test_schedule_recurring_visit_with_room(self) -> None:
        payload = self._payload(
            include_room_booking=True,
            room_id=str(self.room.id),
            recurrence={"type": "weekly", "end_date": str(self.day + timedelta(days=7))},
        )

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(len(response.data["visits"]), 2)
        self.assertEqual(len(response.data["bookings"]), 2)
        self.assertEqual(response.data["visits"][0]["date"], str(self.day))
        self.assertEqual(response.data["visits"][0]["contractor_type"], "volunteer")
        self.assertEqual(response.data["bookings"][0]["title"], "Bob Smith - Garden")
        self.assertEqual(Contractor.objects.get().name, "Bob Smith")
        self.assertEqual(
            set(Booking.objects.values_list("series_id", flat=True)),
            set(ContractorVisit.objects.values_list("series_id", flat=True)),
        )

    def test_room_conflict(self) -> None:
        tz = facility_timezone()
        Booking.objects.create(
            room=self.room,
            title="Board meeting",
            start_time=combine_local(self.day, time(11), tz),
            end_time=combine_local(self.day, time(12), tz),
        )

        response = self.client.post(
            self.list_url,
            self._payload(include_room_booking=True, room_id=str(self.room.id)),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("non_field_errors", response.data)
        self.assertFalse(Contractor.objects.exists())
        self.assertFalse(ContractorVisit.objects.exists())

    def test_validation_errors(self) -> None:
        response = self.client.post(
            self.list_url,
            self._payload(end_time="08:00", authorizer="", owner_phone="call me"),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(set(response.data), {"end_time", "authorizer", "owner_phone"})

    def test_list_by_day(self) -> None:
        contractor = Contractor.objects.create(name="Ada")
        for offset, purpose in ((0, "Today"), (1, "Tomorrow")):
            ContractorVisit.objects.create(
                contractor=contractor,
                visit_date=pin_to_midday_utc(self.day + timedelta(days=offset)),
                start_time=time(9),
                end_time=time(10),
                purpose=purpose,
            )

        response = self.client.get(self.list_url, {"view": "day", "date": str(self.day)})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([visit["purpose"] for visit in response.data], ["Today"])

    def test_patch_status(self) -> None:
        contractor = Contractor.objects.create(name="Ada")
        visit = ContractorVisit.objects.create(
            contractor=contractor,
            visit_date=pin_to_midday_utc(self.day),
            start_time=time(9),
            end_time=time(10),
        )

        response = self.client.patch(
            reverse("contractor-visit-detail", kwargs={"pk": visit.id}),
            {"status": "checked-in"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        visit.refresh_from_db()
        self.assertEqual(visit.status, "checked-in")


class GuestVisitAPITests(APITestCase):
    def setUp(self) -> None:
        self.partner = Partner.objects.create(name="Riverside School")
        self.room = Room.objects.create(name="Hall")
        self.day = timezone.localdate() + timedelta(days=4)
        self.list_url = reverse("guest-visit-list")

    def test_full_day_guest_visit(self) -> None:
        payload = {
            "visit_date": str(self.day),
            "is_full_day": True,
            "owner_id": str(self.partner.id),
            "guest_details": "Year 6 trip",
            "authorizer": "Georgina",
            "include_room_booking": True,
            "room_id": str(self.room.id),
        }

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        visit = response.data["visits"][0]
        self.assertTrue(visit["is_full_day"])
        self.assertIsNone(visit["start_time"])
        self.assertEqual(visit["partner_name"], "Riverside School")
        self.assertEqual(response.data["bookings"][0]["title"], "Riverside School - Guest Visit")
        self.assertEqual(str(response.data["owner_id"]), str(self.partner.id))

    def test_unknown_partner(self) -> None:
        payload = {
            "visit_date": str(self.day),
            "start_time": "10:00",
            "end_time": "11:00",
            "owner_id": "7c0b6f1e-5b6a-4d8e-9a51-0c3e2f1d4b7a",
            "authorizer": "Georgina",
        }

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("owner_id", response.data)
        self.assertFalse(GuestVisit.objects.exists())

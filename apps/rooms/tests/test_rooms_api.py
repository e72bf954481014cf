"""Integration tests for the rooms API."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.rooms.models import Room


class RoomAPITests(APITestCase):
    def setUp(self) -> None:
        self.list_url = reverse("room-list")

    def test_create_and_list_rooms(self) -> None:
        response = self.client.post(self.list_url, {"name": "Board Room", "capacity": 12}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

        Room.objects.create(name="Art Studio")
        listing = self.client.get(self.list_url)

        self.assertEqual(listing.status_code, status.HTTP_200_OK)
        names = [room["name"] for room in listing.data]
        self.assertEqual(names, ["Art Studio", "Board Room"])

    def test_room_names_are_unique(self) -> None:
        Room.objects.create(name="Board Room")

        response = self.client.post(self.list_url, {"name": "Board Room"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("name", response.data)

"""API views for rooms."""

from __future__ import annotations

from rest_framework import viewsets  # type: ignore

from .models import Room
from .serializers import RoomSerializer


class RoomViewSet(viewsets.ModelViewSet):
    """CRUD for the rooms of the facility."""

    queryset = Room.objects.all()
    serializer_class = RoomSerializer

"""API views for the booking domain."""

from __future__ import annotations

from rest_framework import status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.infrastructure.api import get_table_client, scheduling_errors_as_api_errors

from .application.command_handlers import (
    CreateBookingHandler,
    DeleteBookingCommand,
    DeleteBookingHandler,
)
from .filters import BookingFilterSet
from .models import Booking
from .serializers import BookingCreateSerializer, BookingSerializer


class BookingViewSet(viewsets.ModelViewSet):
    """Viewset for listing, creating and deleting room bookings.

    Creation goes through CreateBookingHandler so recurring and multi-room
    submissions are conflict-checked as a whole. Only descriptive fields
    can be changed afterwards; moving a booking means deleting and
    re-creating it.
    """

    queryset = Booking.objects.select_related("room").all()
    filterset_class = BookingFilterSet
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        return BookingSerializer

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        handler = CreateBookingHandler(get_table_client())
        with scheduling_errors_as_api_errors():
            rows = handler.handle(serializer.to_command())

        bookings = self.get_queryset().filter(id__in=[row["id"] for row in rows]).order_by("room__name", "start_time")
        read_serializer = BookingSerializer(bookings, many=True, context=self.get_serializer_context())
        return Response(read_serializer.data, status=status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        handler = DeleteBookingHandler(get_table_client())
        with scheduling_errors_as_api_errors():
            handler.handle(DeleteBookingCommand(booking_id=booking.id))
        return Response(status=status.HTTP_204_NO_CONTENT)

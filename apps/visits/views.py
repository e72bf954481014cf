"""API views for contractors, partners and visits."""

from __future__ import annotations

from rest_framework import status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.models import Booking
from apps.bookings.serializers import BookingSerializer
from shared.infrastructure.api import get_table_client, scheduling_errors_as_api_errors

from .application.command_handlers import CONTRACTOR_VISIT, GUEST_VISIT, ScheduleVisitHandler
from .filters import ContractorVisitFilterSet, GuestVisitFilterSet
from .models import Contractor, ContractorVisit, GuestVisit, Partner
from .serializers import (
    ContractorSerializer,
    ContractorVisitSerializer,
    GuestVisitSerializer,
    PartnerSerializer,
    VisitScheduleSerializer,
)


class ContractorViewSet(viewsets.ModelViewSet):
    queryset = Contractor.objects.all()
    serializer_class = ContractorSerializer
    filterset_fields = ["type"]


class PartnerViewSet(viewsets.ModelViewSet):
    queryset = Partner.objects.all()
    serializer_class = PartnerSerializer


class VisitViewSet(viewsets.ModelViewSet):
    """Base viewset for visit series.

    Creation expands the submitted series through ScheduleVisitHandler;
    updates are limited to descriptive fields and status, and deleting
    removes a single occurrence.
    """

    visit_kind = CONTRACTOR_VISIT
    read_serializer_class = ContractorVisitSerializer
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return VisitScheduleSerializer
        return self.read_serializer_class

    def get_serializer_context(self):  # type: ignore
        context = super().get_serializer_context()
        context["visit_kind"] = self.visit_kind
        return context

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        handler = ScheduleVisitHandler(get_table_client(), self.visit_kind)
        with scheduling_errors_as_api_errors():
            result = handler.handle(serializer.to_command())

        visits = self.get_queryset().filter(id__in=[visit["id"] for visit in result.visits])
        bookings = Booking.objects.select_related("room").filter(id__in=[row["id"] for row in result.bookings])
        context = self.get_serializer_context()
        return Response(
            {
                "series_id": result.series_id,
                "owner_id": result.owner["id"],
                "visits": self.read_serializer_class(visits, many=True, context=context).data,
                "bookings": BookingSerializer(bookings, many=True, context=context).data,
            },
            status=status.HTTP_201_CREATED,
        )


class ContractorVisitViewSet(VisitViewSet):
    queryset = ContractorVisit.objects.select_related("contractor").all()
    filterset_class = ContractorVisitFilterSet
    visit_kind = CONTRACTOR_VISIT
    read_serializer_class = ContractorVisitSerializer


class GuestVisitViewSet(VisitViewSet):
    queryset = GuestVisit.objects.select_related("partner").all()
    filterset_class = GuestVisitFilterSet
    visit_kind = GUEST_VISIT
    read_serializer_class = GuestVisitSerializer

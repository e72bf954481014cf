"""API views for caretakers and weekend rotas."""

from __future__ import annotations

from django.utils.dateparse import parse_date  # type: ignore
from rest_framework import serializers, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from shared.infrastructure.api import get_table_client, scheduling_errors_as_api_errors

from .models import Caretaker, WeekendAssignment
from .serializers import CaretakerSerializer, WeekendAssignmentSerializer, WeekendRotaSerializer
from .services import list_weekend_assignments, save_weekend_assignments


class CaretakerViewSet(viewsets.ModelViewSet):
    queryset = Caretaker.objects.all()
    serializer_class = CaretakerSerializer


class WeekendAssignmentsView(APIView):
    """GET or replace the rota of the weekend containing <weekend_date>."""

    serializer_class = WeekendRotaSerializer

    @staticmethod
    def _weekend_date(value: str):
        parsed = parse_date(value)
        if parsed is None:
            raise serializers.ValidationError({"weekend_date": "Expected a date in YYYY-MM-DD format."})
        return parsed

    def _respond(self, rows):
        assignments = WeekendAssignment.objects.select_related("caretaker").filter(
            id__in=[row["id"] for row in rows]
        )
        return Response(WeekendAssignmentSerializer(assignments, many=True).data)

    def get(self, request, weekend_date: str):  # type: ignore
        with scheduling_errors_as_api_errors():
            rows = list_weekend_assignments(get_table_client(), self._weekend_date(weekend_date))
        return self._respond(rows)

    def put(self, request, weekend_date: str):  # type: ignore
        serializer = WeekendRotaSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with scheduling_errors_as_api_errors():
            rows = save_weekend_assignments(
                get_table_client(),
                self._weekend_date(weekend_date),
                saturday=serializer.validated_data["saturday"],
                sunday=serializer.validated_data["sunday"],
            )
        return self._respond(rows)

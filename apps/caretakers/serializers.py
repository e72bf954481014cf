"""Serializers for caretakers and weekend rotas."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Caretaker, WeekendAssignment


class CaretakerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Caretaker
        fields = ["id", "name", "email", "phone", "color", "created_at"]
        read_only_fields = ["id", "created_at"]


class WeekendAssignmentSerializer(serializers.ModelSerializer):
    caretaker_name = serializers.ReadOnlyField(source="caretaker.name")
    caretaker_color = serializers.ReadOnlyField(source="caretaker.color")

    class Meta:
        model = WeekendAssignment
        fields = [
            "id",
            "caretaker",
            "caretaker_name",
            "caretaker_color",
            "weekend_start_date",
            "day_of_week",
            "start_time",
            "end_time",
            "notes",
        ]


class ShiftSerializer(serializers.Serializer):
    """One row of the rota editor; incomplete rows are accepted and skipped."""

    id = serializers.UUIDField(required=False, allow_null=True)
    caretaker_id = serializers.UUIDField(required=False, allow_null=True)
    start_time = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    end_time = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class WeekendRotaSerializer(serializers.Serializer):
    saturday = ShiftSerializer(many=True, required=False, default=list)
    sunday = ShiftSerializer(many=True, required=False, default=list)

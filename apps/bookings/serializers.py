"""Serializers for the booking domain."""

from __future__ import annotations

from datetime import time, timedelta

from rest_framework import serializers  # type: ignore

from shared.application.config import facility_timezone
from shared.application.validation import BOOKING_FORM_RULES, validate_form
from shared.domain.dates import combine_local

from .application.command_handlers import CreateBookingCommand
from .domain.recurrence import RecurrenceRule, RecurrenceType, Weekday
from .models import Booking


def build_recurrence_rule(data: dict | None) -> RecurrenceRule:
    """Turn the recurrence block of a form into a rule.

    The form's end date is a calendar date and is inclusive: the bound
    becomes local midnight at the start of the following day.
    """
    if not data:
        return RecurrenceRule.none()

    rule_type = data.get("type") or RecurrenceType.NONE.value
    interval = data.get("interval") or 1
    if rule_type == "bi-weekly":
        rule_type, interval = RecurrenceType.WEEKLY.value, interval * 2

    end_date = data.get("end_date")
    bound = combine_local(end_date + timedelta(days=1), time.min, facility_timezone()) if end_date else None
    return RecurrenceRule(
        type=RecurrenceType(rule_type),
        interval=interval,
        days_of_week=frozenset(data.get("days_of_week") or ()),
        end_date=bound,
    )


class RecurrenceSerializer(serializers.Serializer):
    """Recurrence block shared by the booking and visit forms."""

    type = serializers.ChoiceField(
        choices=[rule_type.value for rule_type in RecurrenceType] + ["bi-weekly"],
        default=RecurrenceType.NONE.value,
    )
    interval = serializers.IntegerField(min_value=1, default=1)
    days_of_week = serializers.ListField(
        child=serializers.ChoiceField(choices=[day.value for day in Weekday]),
        required=False,
        default=list,
    )
    end_date = serializers.DateField(required=False, allow_null=True)

    def validate(self, attrs):  # type: ignore
        try:
            attrs["rule"] = build_recurrence_rule(attrs)
        except ValueError as exc:
            raise serializers.ValidationError(str(exc))
        return attrs


class BookingCreateSerializer(serializers.Serializer):
    """Booking form: one or more rooms, optionally recurring."""

    room_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=True)
    title = serializers.CharField(allow_blank=True, max_length=200)
    description = serializers.CharField(allow_blank=True, required=False, default="")
    authorizer = serializers.CharField(allow_blank=True, required=False, default="")
    user_id = serializers.CharField(allow_null=True, required=False, default=None, max_length=64)
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()
    recurrence = RecurrenceSerializer(required=False, allow_null=True)

    def validate(self, attrs):  # type: ignore
        errors = validate_form(attrs, BOOKING_FORM_RULES)
        if errors:
            raise serializers.ValidationError(errors)
        return attrs

    def to_command(self) -> CreateBookingCommand:
        data = self.validated_data
        recurrence = data.get("recurrence") or {}
        return CreateBookingCommand(
            room_ids=data["room_ids"],
            title=data["title"],
            description=data.get("description", ""),
            authorizer=data.get("authorizer", ""),
            user_id=data.get("user_id"),
            start=data["start"],
            end=data["end"],
            recurrence=recurrence.get("rule") or RecurrenceRule.none(),
        )


class BookingSerializer(serializers.ModelSerializer):
    """Detailed booking representation."""

    room_name = serializers.ReadOnlyField(source="room.name")

    class Meta:
        model = Booking
        fields = [
            "id",
            "room",
            "room_name",
            "user_id",
            "title",
            "description",
            "start_time",
            "end_time",
            "is_recurring",
            "recurrence_pattern",
            "series_id",
            "authorizer",
            "created_at",
        ]
        read_only_fields = [
            "id",
            "room",
            "room_name",
            "user_id",
            "start_time",
            "end_time",
            "is_recurring",
            "recurrence_pattern",
            "series_id",
            "created_at",
        ]

"""Serializers for contractors, partners and their visits."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.bookings.domain.recurrence import RecurrenceRule
from apps.bookings.serializers import RecurrenceSerializer
from shared.application.validation import validate_form

from .application.command_handlers import ScheduleVisitCommand
from .models import Contractor, ContractorVisit, GuestVisit, Partner


class ContractorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Contractor
        fields = ["id", "name", "company", "email", "phone", "notes", "type", "created_at"]
        read_only_fields = ["id", "created_at"]


class PartnerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Partner
        fields = ["id", "name", "company", "email", "phone", "created_at"]
        read_only_fields = ["id", "created_at"]


class VisitScheduleSerializer(serializers.Serializer):
    """Visit form shared by contractor and guest visits.

    The rule table of the visit kind in the serializer context decides
    which fields are required.
    """

    visit_date = serializers.DateField()
    start_time = serializers.TimeField(required=False, allow_null=True, default=None)
    end_time = serializers.TimeField(required=False, allow_null=True, default=None)
    is_full_day = serializers.BooleanField(required=False, default=False)
    owner_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    is_new_owner = serializers.BooleanField(required=False, default=False)
    owner_name = serializers.CharField(required=False, allow_blank=True, default="")
    owner_company = serializers.CharField(required=False, allow_blank=True, default="")
    owner_email = serializers.CharField(required=False, allow_blank=True, default="")
    owner_phone = serializers.CharField(required=False, allow_blank=True, default="")
    owner_type = serializers.CharField(required=False, allow_blank=True, default="contractor")
    purpose = serializers.CharField(required=False, allow_blank=True, default="")
    guest_details = serializers.CharField(required=False, allow_blank=True, default="")
    authorizer = serializers.CharField(required=False, allow_blank=True, default="")
    recurrence = RecurrenceSerializer(required=False, allow_null=True)
    include_room_booking = serializers.BooleanField(required=False, default=False)
    room_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    room_booking_title = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):  # type: ignore
        errors = validate_form(attrs, self.context["visit_kind"].rules)
        if errors:
            raise serializers.ValidationError(errors)
        return attrs

    def to_command(self) -> ScheduleVisitCommand:
        data = dict(self.validated_data)
        recurrence = data.pop("recurrence", None) or {}
        return ScheduleVisitCommand(recurrence=recurrence.get("rule") or RecurrenceRule.none(), **data)


class ContractorVisitSerializer(serializers.ModelSerializer):
    contractor_name = serializers.ReadOnlyField(source="contractor.name")
    contractor_type = serializers.ReadOnlyField(source="contractor.type")
    date = serializers.DateField(source="day", read_only=True)

    class Meta:
        model = ContractorVisit
        fields = [
            "id",
            "contractor",
            "contractor_name",
            "contractor_type",
            "visit_date",
            "date",
            "start_time",
            "end_time",
            "purpose",
            "status",
            "is_recurring",
            "recurrence_pattern",
            "series_id",
            "authorizer",
            "created_at",
        ]
        read_only_fields = [
            "id",
            "contractor",
            "visit_date",
            "start_time",
            "end_time",
            "is_recurring",
            "recurrence_pattern",
            "series_id",
            "created_at",
        ]


class GuestVisitSerializer(serializers.ModelSerializer):
    date = serializers.DateField(source="day", read_only=True)
    is_full_day = serializers.BooleanField(read_only=True)

    class Meta:
        model = GuestVisit
        fields = [
            "id",
            "partner",
            "partner_name",
            "visit_date",
            "date",
            "start_time",
            "end_time",
            "is_full_day",
            "purpose",
            "guest_details",
            "status",
            "check_in_time",
            "check_out_time",
            "is_recurring",
            "recurrence_pattern",
            "series_id",
            "authorizer",
            "created_at",
        ]
        read_only_fields = [
            "id",
            "partner",
            "partner_name",
            "visit_date",
            "start_time",
            "end_time",
            "is_recurring",
            "recurrence_pattern",
            "series_id",
            "created_at",
        ]

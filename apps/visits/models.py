"""Visit models: contractors, partners and their visits."""

from __future__ import annotations

import uuid

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.dates import pinned_date


class VisitStatus(models.TextChoices):
    SCHEDULED = "scheduled", _("Scheduled")
    CHECKED_IN = "checked-in", _("Checked in")
    COMPLETED = "completed", _("Completed")
    CANCELLED = "cancelled", _("Cancelled")


class Contractor(models.Model):
    """A contractor or volunteer working at the facility."""

    class Type(models.TextChoices):
        CONTRACTOR = "contractor", _("Contractor")
        VOLUNTEER = "volunteer", _("Volunteer")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    company = models.CharField(max_length=200, null=True, blank=True)
    email = models.EmailField(null=True, blank=True)
    phone = models.CharField(max_length=32, null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    type = models.CharField(max_length=20, choices=Type.choices, default=Type.CONTRACTOR)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "contractors"
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Partner(models.Model):
    """A partner organisation whose guests visit the facility."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    company = models.CharField(max_length=200, null=True, blank=True)
    email = models.EmailField(null=True, blank=True)
    phone = models.CharField(max_length=32, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "partners"
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class VisitBase(models.Model):
    """Columns shared by contractor and guest visits.

    visit_date is a date-only value stored as an instant pinned to 12:00
    UTC; start_time and end_time are wall-clock times at the facility.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    visit_date = models.DateTimeField()
    purpose = models.TextField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=VisitStatus.choices, default=VisitStatus.SCHEDULED)
    is_recurring = models.BooleanField(default=False)
    recurrence_pattern = models.JSONField(null=True, blank=True)
    series_id = models.UUIDField(null=True, blank=True, db_index=True)
    authorizer = models.CharField(max_length=100, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ["visit_date", "start_time"]

    @property
    def day(self):
        return pinned_date(self.visit_date)


class ContractorVisit(VisitBase):
    contractor = models.ForeignKey(Contractor, on_delete=models.CASCADE, related_name="visits")
    start_time = models.TimeField()
    end_time = models.TimeField()

    class Meta(VisitBase.Meta):
        db_table = "contractor_visits"

    def __str__(self) -> str:
        return f"{self.contractor_id} on {self.day}"


class GuestVisit(VisitBase):
    """A partner guest visit; full-day visits have no start or end time."""

    partner = models.ForeignKey(Partner, on_delete=models.CASCADE, null=True, blank=True, related_name="visits")
    partner_name = models.CharField(max_length=200, null=True, blank=True)
    start_time = models.TimeField(null=True, blank=True)
    end_time = models.TimeField(null=True, blank=True)
    guest_details = models.TextField(null=True, blank=True)
    check_in_time = models.DateTimeField(null=True, blank=True)
    check_out_time = models.DateTimeField(null=True, blank=True)

    class Meta(VisitBase.Meta):
        db_table = "guest_visits"

    def __str__(self) -> str:
        return f"{self.partner_name or self.partner_id} on {self.day}"

    @property
    def is_full_day(self) -> bool:
        return self.start_time is None

"""Caretaker models."""

from __future__ import annotations

import uuid

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Caretaker(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    email = models.EmailField(null=True, blank=True)
    phone = models.CharField(max_length=32, null=True, blank=True)
    color = models.CharField(max_length=20, default="#3b82f6", help_text=_("Calendar colour."))
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "caretakers"
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class WeekendAssignment(models.Model):
    """One caretaker shift; weekend_start_date is always the Saturday."""

    class Day(models.TextChoices):
        SATURDAY = "saturday", _("Saturday")
        SUNDAY = "sunday", _("Sunday")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    caretaker = models.ForeignKey(Caretaker, on_delete=models.CASCADE, related_name="assignments")
    weekend_start_date = models.DateField(db_index=True)
    day_of_week = models.CharField(max_length=10, choices=Day.choices)
    start_time = models.TimeField()
    end_time = models.TimeField()
    notes = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "weekend_assignments"
        ordering = ["weekend_start_date", "day_of_week", "start_time"]

    def __str__(self) -> str:
        return f"{self.caretaker_id} {self.day_of_week} {self.weekend_start_date}"

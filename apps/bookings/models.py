"""Booking models for the facility."""

from __future__ import annotations

import uuid

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.bookings.domain.recurrence import RecurrenceRule
from shared.domain.value_objects import TimeRange


class Booking(models.Model):
    """One occurrence of a room reservation.

    Recurring submissions are stored as independent rows sharing a
    ``series_id``; deleting a row never touches its siblings.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room = models.ForeignKey(
        "rooms.Room",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bookings",
    )
    user_id = models.CharField(max_length=64, null=True, blank=True)
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    is_recurring = models.BooleanField(default=False)
    recurrence_pattern = models.JSONField(
        null=True,
        blank=True,
        help_text=_("Versioned recurrence descriptor of the series this occurrence belongs to."),
    )
    series_id = models.UUIDField(null=True, blank=True, db_index=True)
    authorizer = models.CharField(max_length=100, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "bookings"
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["start_time"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F("start_time")),
                name="booking_end_after_start",
            ),
        ]
        indexes = [
            models.Index(fields=["room", "start_time", "end_time"]),
        ]

    def __str__(self) -> str:
        return f"{self.title} ({self.start_time:%Y-%m-%d %H:%M})"

    @property
    def period(self) -> TimeRange:
        return TimeRange(self.start_time, self.end_time)

    @property
    def recurrence(self) -> RecurrenceRule:
        return RecurrenceRule.from_dict(self.recurrence_pattern)

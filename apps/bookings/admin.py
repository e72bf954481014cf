"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "room",
        "start_time",
        "end_time",
        "is_recurring",
        "authorizer",
        "created_at",
    )
    list_filter = ("room", "is_recurring", "start_time")
    search_fields = ("title", "description", "authorizer", "room__name")
    readonly_fields = ("series_id", "recurrence_pattern", "created_at")

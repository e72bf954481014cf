"""Admin registration for caretakers."""

from __future__ import annotations

from django.contrib import admin

from .models import Caretaker, WeekendAssignment


@admin.register(Caretaker)
class CaretakerAdmin(admin.ModelAdmin):
    list_display = ("name", "email", "phone", "color")
    search_fields = ("name", "email")


@admin.register(WeekendAssignment)
class WeekendAssignmentAdmin(admin.ModelAdmin):
    list_display = ("weekend_start_date", "day_of_week", "caretaker", "start_time", "end_time")
    list_filter = ("day_of_week", "weekend_start_date")

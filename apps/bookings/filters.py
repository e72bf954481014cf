"""FilterSet definitions for booking lists and calendar windows."""

from __future__ import annotations

import django_filters  # type: ignore
from django.utils import timezone  # type: ignore

from shared.application.config import facility_timezone, scheduling_setting
from shared.domain.calendar import DAY, VIEWS, calendar_window

from .models import Booking


def filter_calendar_window(queryset, view: str, anchor, *, start_field: str, end_field: str):
    """Keep the rows overlapping the calendar window of view around anchor."""
    window = calendar_window(
        view,
        anchor,
        tz=facility_timezone(),
        week_starts_on=scheduling_setting("WEEK_STARTS_ON"),
    )
    return queryset.filter(**{f"{start_field}__lt": window.end, f"{end_field}__gt": window.start})


class BookingFilterSet(django_filters.FilterSet):
    """?view=day|week|month&date=YYYY-MM-DD&room=<uuid>&series=<uuid>"""

    room = django_filters.UUIDFilter(field_name="room_id")
    series = django_filters.UUIDFilter(field_name="series_id")
    view = django_filters.ChoiceFilter(choices=[(view, view) for view in VIEWS], method="filter_view")
    date = django_filters.DateFilter(method="filter_date")

    class Meta:
        model = Booking
        fields = ["room", "series"]

    def filter_view(self, queryset, name, value):  # type: ignore
        if self.form.cleaned_data.get("date"):
            # filter_date applies the window
            return queryset
        return filter_calendar_window(
            queryset, value, timezone.localdate(), start_field="start_time", end_field="end_time"
        )

    def filter_date(self, queryset, name, value):  # type: ignore
        view = self.form.cleaned_data.get("view") or DAY
        return filter_calendar_window(queryset, view, value, start_field="start_time", end_field="end_time")

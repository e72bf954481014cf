"""FilterSet definitions for visit lists."""

from __future__ import annotations

import django_filters  # type: ignore
from django.utils import timezone  # type: ignore

from shared.application.config import facility_timezone, scheduling_setting
from shared.domain.calendar import DAY, VIEWS, calendar_window
from shared.domain.dates import pin_to_midday_utc

from .models import ContractorVisit, GuestVisit


class VisitWindowFilterSet(django_filters.FilterSet):
    """?view=day|week|month&date=YYYY-MM-DD&status=...

    Visit dates are pinned instants, so the window is applied to the
    calendar days it covers rather than to instants.
    """

    view = django_filters.ChoiceFilter(choices=[(view, view) for view in VIEWS], method="filter_view")
    date = django_filters.DateFilter(method="filter_date")
    series = django_filters.UUIDFilter(field_name="series_id")

    def filter_view(self, queryset, name, value):  # type: ignore
        if self.form.cleaned_data.get("date"):
            return queryset
        return self._window(queryset, value, timezone.localdate())

    def filter_date(self, queryset, name, value):  # type: ignore
        return self._window(queryset, self.form.cleaned_data.get("view") or DAY, value)

    @staticmethod
    def _window(queryset, view, anchor):
        window = calendar_window(
            view,
            anchor,
            tz=facility_timezone(),
            week_starts_on=scheduling_setting("WEEK_STARTS_ON"),
        )
        pin_hour = scheduling_setting("VISIT_DATE_PIN_HOUR_UTC")
        return queryset.filter(
            visit_date__gte=pin_to_midday_utc(window.start.date(), pin_hour),
            visit_date__lt=pin_to_midday_utc(window.end.date(), pin_hour),
        )


class ContractorVisitFilterSet(VisitWindowFilterSet):
    contractor = django_filters.UUIDFilter(field_name="contractor_id")

    class Meta:
        model = ContractorVisit
        fields = ["contractor", "status", "series"]


class GuestVisitFilterSet(VisitWindowFilterSet):
    partner = django_filters.UUIDFilter(field_name="partner_id")

    class Meta:
        model = GuestVisit
        fields = ["partner", "status", "series"]

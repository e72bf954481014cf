"""Access to the FACILITY_SCHEDULING settings block."""

from __future__ import annotations

from typing import Any

from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore

DEFAULTS: dict[str, Any] = {
    "BOOKING_RECURRENCE_CAP_MONTHS": 3,
    "VISIT_RECURRENCE_CAP_MONTHS": 12,
    "MAX_OCCURRENCES": 500,
    "WEEK_STARTS_ON": 0,
    "VISIT_DATE_PIN_HOUR_UTC": 12,
    "FULL_DAY_VISIT_HOURS": ("08:00", "18:00"),
    "AUTHORIZERS": [],
    "SUMMARY_RECIPIENTS": [],
}


def scheduling_setting(name: str) -> Any:
    """Return a scheduling option, falling back to the built-in default."""

    configured = getattr(settings, "FACILITY_SCHEDULING", {}) or {}
    if name in configured:
        return configured[name]
    return DEFAULTS[name]


def facility_timezone():
    """Timezone the facility's wall clock runs in (settings.TIME_ZONE)."""

    return timezone.get_default_timezone()

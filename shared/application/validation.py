"""
Declarative form validation

The booking, contractor-visit and partner-visit forms are validated by one
engine driven by a rule table per entity type. A rule is a callable
``rule(value, values) -> error message | None``; ``values`` is the whole form
so cross-field rules (end after start, room required when a room booking is
requested) can look at their siblings.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Any, Callable, Iterable, Mapping

from django.utils import timezone  # type: ignore

from shared.application.config import scheduling_setting
from shared.domain.dates import parse_clock

Rule = Callable[[Any, Mapping[str, Any]], "str | None"]
RuleTable = Mapping[str, Rule]

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\+?[1-9]\d{0,15}$")
PHONE_STRIP_RE = re.compile(r"[\s\-()]")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return not value
    return False


def required(message: str = "This field is required") -> Rule:
    def rule(value, values):
        return message if _is_blank(value) else None

    return rule


def email(message: str = "Please enter a valid email address") -> Rule:
    def rule(value, values):
        if _is_blank(value):
            return None
        return None if EMAIL_RE.match(str(value)) else message

    return rule


def phone(message: str = "Please enter a valid phone number") -> Rule:
    def rule(value, values):
        if _is_blank(value):
            return None
        return None if PHONE_RE.match(PHONE_STRIP_RE.sub("", str(value))) else message

    return rule


def clock_time(message: str = "Please enter a valid time (HH:MM)") -> Rule:
    def rule(value, values):
        if _is_blank(value) or isinstance(value, time):
            return None
        try:
            parse_clock(value)
        except ValueError:
            return message
        return None

    return rule


def after(other_field: str, message: str = "End time must be after start time") -> Rule:
    """The field must be strictly greater than ``values[other_field]``."""

    def rule(value, values):
        other = values.get(other_field)
        if _is_blank(value) or _is_blank(other):
            return None
        try:
            if isinstance(value, str) or isinstance(other, str):
                value, other = parse_clock(value), parse_clock(other)
        except ValueError:
            return None
        return None if value > other else message

    return rule


def future_date(
    message: str = "Cannot book dates in the past",
    *,
    today: Callable[[], date] = timezone.localdate,
) -> Rule:
    """The (local) calendar day must be today or later."""

    def rule(value, values):
        if _is_blank(value):
            return None
        day = value
        if isinstance(value, datetime):
            day = timezone.localdate(value) if timezone.is_aware(value) else value.date()
        return None if day >= today() else message

    return rule


def known_authorizer(message: str = "Please select a valid authorizer") -> Rule:
    """The value must be listed in FACILITY_SCHEDULING["AUTHORIZERS"] (when that list is set)."""

    def rule(value, values):
        allowed = scheduling_setting("AUTHORIZERS")
        if _is_blank(value) or not allowed:
            return None
        return None if str(value).strip() in allowed else message

    return rule


def max_length(length: int) -> Rule:
    def rule(value, values):
        if _is_blank(value):
            return None
        return None if len(str(value).strip()) <= length else f"Must be no more than {length} characters"

    return rule


def one_of(choices: Iterable[Any], message: str = "Please select a valid option") -> Rule:
    allowed = set(choices)

    def rule(value, values):
        if _is_blank(value):
            return None
        return None if value in allowed else message

    return rule


def when(predicate: Callable[[Mapping[str, Any]], bool], rule: Rule) -> Rule:
    """Apply ``rule`` only when ``predicate(values)`` holds."""

    def conditional(value, values):
        return rule(value, values) if predicate(values) else None

    return conditional


def combine(*rules: Rule) -> Rule:
    """Run rules in order and return the first error."""

    def combined(value, values):
        for rule in rules:
            error = rule(value, values)
            if error:
                return error
        return None

    return combined


def validate_form(values: Mapping[str, Any], rules: RuleTable) -> dict[str, str] | None:
    """Validate a whole form; returns ``{field: message}`` or None when valid."""

    errors: dict[str, str] = {}
    for field, rule in rules.items():
        error = rule(values.get(field), values)
        if error:
            errors[field] = error
    return errors or None


def _flag(name: str) -> Callable[[Mapping[str, Any]], bool]:
    return lambda values: bool(values.get(name))


def _not_flag(name: str) -> Callable[[Mapping[str, Any]], bool]:
    return lambda values: not values.get(name)


# ===== Rule tables =====

BOOKING_FORM_RULES: RuleTable = {
    "room_ids": required("Please select at least one room"),
    "authorizer": combine(required("Please select who authorized this booking"), known_authorizer()),
    "title": combine(required("Please enter a title for the booking"), max_length(200)),
    "start": combine(required("Please choose a start time"), future_date()),
    "end": combine(required("Please choose an end time"), after("start")),
}

_VISIT_COMMON_RULES: dict[str, Rule] = {
    "visit_date": combine(required("Please choose a visit date"), future_date()),
    "start_time": when(_not_flag("is_full_day"), combine(required("Please choose a start time"), clock_time())),
    "end_time": when(
        _not_flag("is_full_day"),
        combine(required("Please choose an end time"), clock_time(), after("start_time")),
    ),
    "authorizer": combine(required("Please select who authorized this visit"), known_authorizer()),
    "room_id": when(_flag("include_room_booking"), required("Please select a room for booking")),
    "owner_email": email(),
    "owner_phone": phone(),
}

CONTRACTOR_VISIT_FORM_RULES: RuleTable = {
    **_VISIT_COMMON_RULES,
    "owner_id": when(_not_flag("is_new_owner"), required("Please select a contractor")),
    "owner_name": when(_flag("is_new_owner"), combine(required("Please enter the contractor's name"), max_length(200))),
    "owner_type": one_of(("contractor", "volunteer"), "Type must be contractor or volunteer"),
}

GUEST_VISIT_FORM_RULES: RuleTable = {
    **_VISIT_COMMON_RULES,
    "owner_id": when(_not_flag("is_new_owner"), required("Please select a partner")),
    "owner_name": when(_flag("is_new_owner"), combine(required("Please enter the partner's name"), max_length(200))),
}

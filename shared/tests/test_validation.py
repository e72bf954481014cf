"""Tests for the declarative form validation rules."""

from __future__ import annotations

from datetime import date, time, timedelta
from unittest import TestCase

from django.test import override_settings
from django.utils import timezone

from shared.application.validation import (
    GUEST_VISIT_FORM_RULES,
    after,
    clock_time,
    combine,
    email,
    future_date,
    known_authorizer,
    max_length,
    one_of,
    phone,
    required,
    validate_form,
    when,
)


class RuleTests(TestCase):
    def test_required_treats_whitespace_and_empty_lists_as_blank(self) -> None:
        rule = required("Needed")

        self.assertEqual(rule("   ", {}), "Needed")
        self.assertEqual(rule([], {}), "Needed")
        self.assertIsNone(rule(0, {}))
        self.assertIsNone(rule(False, {}))

    def test_email(self) -> None:
        self.assertIsNone(email()("ada@example.org", {}))
        self.assertIsNone(email()("", {}))
        self.assertIsNotNone(email()("ada@example", {}))

    def test_phone_ignores_formatting(self) -> None:
        self.assertIsNone(phone()("+44 20 7946-0958", {}))
        self.assertIsNotNone(phone()("0123", {}))
        self.assertIsNotNone(phone()("call me", {}))

    def test_clock_time(self) -> None:
        self.assertIsNone(clock_time()("23:59", {}))
        self.assertIsNone(clock_time()(time(7, 30), {}))
        self.assertIsNotNone(clock_time()("24:00", {}))

    def test_after_compares_clock_strings(self) -> None:
        rule = after("start")

        self.assertIsNotNone(rule("09:00", {"start": "09:00"}))
        self.assertIsNone(rule("9:30", {"start": "09:00"}))
        self.assertIsNone(rule("10:00", {"start": ""}))

    def test_future_date(self) -> None:
        today = date(2030, 1, 7)
        rule = future_date(today=lambda: today)

        self.assertIsNone(rule(today, {}))
        self.assertEqual(rule(today - timedelta(days=1), {}), "Cannot book dates in the past")

    def test_lengths_and_choices(self) -> None:
        self.assertIsNotNone(max_length(3)("abcd", {}))
        self.assertIsNone(one_of(("a", "b"))("a", {}))
        self.assertIsNotNone(one_of(("a", "b"))("c", {}))

    def test_when_and_combine(self) -> None:
        rule = when(lambda values: values.get("enabled"), combine(required("first"), max_length(2)))

        self.assertIsNone(rule("", {"enabled": False}))
        self.assertEqual(rule("", {"enabled": True}), "first")
        self.assertEqual(rule("abc", {"enabled": True}), "Must be no more than 2 characters")


class VisitFormTests(TestCase):
    def setUp(self) -> None:
        self.values = {
            "visit_date": timezone.localdate() + timedelta(days=1),
            "start_time": "10:00",
            "end_time": "11:00",
            "authorizer": "Sasha",
            "owner_id": "partner-1",
        }

    def test_valid_form(self) -> None:
        self.assertIsNone(validate_form(self.values, GUEST_VISIT_FORM_RULES))

    def test_full_day_skips_times(self) -> None:
        values = {**self.values, "is_full_day": True, "start_time": None, "end_time": None}

        self.assertIsNone(validate_form(values, GUEST_VISIT_FORM_RULES))

    def test_errors_are_keyed_by_field(self) -> None:
        values = {**self.values, "end_time": "09:00", "include_room_booking": True, "owner_id": None}

        errors = validate_form(values, GUEST_VISIT_FORM_RULES)

        self.assertEqual(errors, {
            "end_time": "End time must be after start time",
            "room_id": "Please select a room for booking",
            "owner_id": "Please select a partner",
        })

    def test_new_partner_needs_a_name(self) -> None:
        values = {**self.values, "owner_id": None, "is_new_owner": True, "owner_name": " "}

        errors = validate_form(values, GUEST_VISIT_FORM_RULES)

        self.assertEqual(errors, {"owner_name": "Please enter the partner's name"})

    def test_authorizer_must_be_configured(self) -> None:
        with override_settings(FACILITY_SCHEDULING={"AUTHORIZERS": ["Sasha", "Lesley"]}):
            self.assertIsNone(known_authorizer()("Sasha", {}))
            self.assertEqual(known_authorizer()("Mallory", {}), "Please select a valid authorizer")

        with override_settings(FACILITY_SCHEDULING={"AUTHORIZERS": []}):
            self.assertIsNone(known_authorizer()("Mallory", {}))

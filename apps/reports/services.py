"""Weekly facility summary."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, time, timedelta, tzinfo
from typing import Any, Sequence

from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.template.loader import render_to_string  # type: ignore
from django.utils.html import strip_tags  # type: ignore

from shared.application import tables
from shared.application.config import facility_timezone, scheduling_setting
from shared.application.tables import AbstractTableClient
from shared.domain.calendar import WEEK, calendar_window, start_of_week
from shared.domain.dates import format_clock, format_clock_range, pin_to_midday_utc, pinned_date

logger = logging.getLogger(__name__)

TEMPLATE_NAME = "reports/weekly_summary.html"


@dataclass
class SummaryItem:
    title: str
    time: str
    detail: str = ""
    by: str = ""


@dataclass
class DaySummary:
    day: date
    room_bookings: list[SummaryItem] = field(default_factory=list)
    contractor_visits: list[SummaryItem] = field(default_factory=list)
    partner_visits: list[SummaryItem] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.room_bookings or self.contractor_visits or self.partner_visits)


@dataclass
class WeeklySummary:
    week_start: date
    days: list[DaySummary]

    @property
    def week_end(self) -> date:
        return self.week_start + timedelta(days=6)

    @property
    def week_range(self) -> str:
        return f"{self.week_start:%A, %B} {self.week_start.day} - {self.week_end:%A, %B} {self.week_end.day}, {self.week_end.year}"

    @property
    def total_bookings(self) -> int:
        return sum(len(day.room_bookings) for day in self.days)

    @property
    def total_contractor_visits(self) -> int:
        return sum(len(day.contractor_visits) for day in self.days)

    @property
    def total_partner_visits(self) -> int:
        return sum(len(day.partner_visits) for day in self.days)


def next_week_start(today: date, week_starts_on: int = 0) -> date:
    """First day of the week after the one containing today."""
    return start_of_week(today, week_starts_on) + timedelta(days=7)


def _names(client: AbstractTableClient, table: str, ids: Sequence[Any]) -> dict[str, dict]:
    if not ids:
        return {}
    return {str(row["id"]): row for row in client.select(table, {"id__in": list(set(ids))})}


def _clock_range(start: time | None, end: time | None) -> str:
    if start is None:
        return "All day"
    if end is None:
        return format_clock(start)
    return format_clock_range(start, end)


def build_weekly_summary(
    client: AbstractTableClient,
    week_start: date,
    *,
    tz: tzinfo | None = None,
) -> WeeklySummary:
    """Collect the week starting at week_start, one DaySummary per day.

    Bookings are grouped by the local day they start on; visits by their
    pinned visit date.
    """
    tz = tz or facility_timezone()
    window = calendar_window(WEEK, week_start, tz=tz, week_starts_on=week_start.weekday())
    days = {week_start + timedelta(days=offset): DaySummary(week_start + timedelta(days=offset)) for offset in range(7)}

    bookings = client.select(
        tables.BOOKINGS,
        {"start_time__gte": window.start, "start_time__lt": window.end},
        order_by=("start_time",),
    )
    rooms = _names(client, tables.ROOMS, [row["room_id"] for row in bookings if row.get("room_id")])
    for row in bookings:
        start, end = row["start_time"].astimezone(tz), row["end_time"].astimezone(tz)
        room = rooms.get(str(row.get("room_id")))
        days[start.date()].room_bookings.append(SummaryItem(
            title=row["title"],
            time=format_clock_range(start, end),
            detail=room["name"] if room else "Unknown Room",
            by=row.get("authorizer") or "",
        ))

    pin_hour = scheduling_setting("VISIT_DATE_PIN_HOUR_UTC")
    visit_filters = {
        "visit_date__gte": pin_to_midday_utc(week_start, pin_hour),
        "visit_date__lt": pin_to_midday_utc(week_start + timedelta(days=7), pin_hour),
    }

    contractor_visits = client.select(tables.CONTRACTOR_VISITS, visit_filters, order_by=("visit_date", "start_time"))
    contractors = _names(client, tables.CONTRACTORS, [row["contractor_id"] for row in contractor_visits])
    for row in contractor_visits:
        contractor = contractors.get(str(row["contractor_id"]))
        name = contractor["name"] if contractor else "Unknown Contractor"
        kind = (contractor or {}).get("type") or "contractor"
        days[pinned_date(row["visit_date"])].contractor_visits.append(SummaryItem(
            title=f"{name} ({kind})",
            time=_clock_range(row.get("start_time"), row.get("end_time")),
            detail=row.get("purpose") or "",
        ))

    partner_visits = client.select(tables.GUEST_VISITS, visit_filters, order_by=("visit_date", "start_time"))
    partners = _names(client, tables.PARTNERS, [row["partner_id"] for row in partner_visits if row.get("partner_id")])
    for row in partner_visits:
        partner = partners.get(str(row.get("partner_id")))
        days[pinned_date(row["visit_date"])].partner_visits.append(SummaryItem(
            title=(partner or {}).get("name") or row.get("partner_name") or "Unknown Partner",
            time=_clock_range(row.get("start_time"), row.get("end_time")),
            detail=row.get("purpose") or row.get("guest_details") or "",
        ))

    return WeeklySummary(week_start=week_start, days=list(days.values()))


def render_weekly_summary(summary: WeeklySummary) -> str:
    return render_to_string(TEMPLATE_NAME, {"summary": summary})


def send_weekly_summary_email(summary: WeeklySummary, recipients: Sequence[str]) -> int:
    """Mail the summary; returns the number of messages sent (0 or 1)."""
    if not recipients:
        logger.warning("Weekly summary not sent: SUMMARY_RECIPIENTS is empty")
        return 0

    html_message = render_weekly_summary(summary)
    sent = send_mail(
        subject=f"Weekly Facility Summary - {summary.week_range}",
        message=strip_tags(html_message),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=list(recipients),
        html_message=html_message,
        fail_silently=False,
    )
    logger.info(f"Weekly summary for {summary.week_start} sent to {len(recipients)} recipient(s)")
    return sent

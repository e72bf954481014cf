"""Celery tasks for reports."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore
from django.utils import timezone  # type: ignore

from shared.application.config import scheduling_setting
from shared.infrastructure.api import get_table_client

from .services import build_weekly_summary, next_week_start, send_weekly_summary_email

logger = logging.getLogger(__name__)


@shared_task(name="reports.send_weekly_summary")
def send_weekly_summary() -> dict[str, int]:
    """
    Mail the summary of next week to the configured recipients.

    Runs every Monday morning through Celery Beat.

    Returns:
        dict: totals of the summarised week and the number of mails sent
    """
    week_start = next_week_start(timezone.localdate(), scheduling_setting("WEEK_STARTS_ON"))
    summary = build_weekly_summary(get_table_client(), week_start)
    sent = send_weekly_summary_email(summary, scheduling_setting("SUMMARY_RECIPIENTS"))

    logger.info(
        f"[REPORTS] Weekly summary {summary.week_range}: {summary.total_bookings} bookings, "
        f"{summary.total_contractor_visits} contractor visits, {summary.total_partner_visits} partner visits"
    )
    return {
        "bookings": summary.total_bookings,
        "contractor_visits": summary.total_contractor_visits,
        "partner_visits": summary.total_partner_visits,
        "sent": sent,
    }

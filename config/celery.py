import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("facility_scheduling")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Summary of next week's bookings and visits, Monday morning
    "send-weekly-summary": {
        "task": "reports.send_weekly_summary",
        "schedule": crontab(minute=0, hour=7, day_of_week="mon"),
    },
}

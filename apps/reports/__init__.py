"""Reports app package.

Builds the weekly facility summary (room bookings, contractor visits and
partner visits of the coming week, grouped per day) and mails it from a
Celery beat task.
"""

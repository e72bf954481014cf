"""Application config for bookings."""

from __future__ import annotations

from django.apps import AppConfig  # type: ignore


class BookingsConfig(AppConfig):
    name = "apps.bookings"
    label = "bookings"
    verbose_name = "Bookings"

    def ready(self) -> None:
        from shared.application.message_bus import message_bus
        from shared.domain.base import DomainEvent

        from .application.event_handlers import log_domain_event

        message_bus.register_event_handler(DomainEvent, log_domain_event)

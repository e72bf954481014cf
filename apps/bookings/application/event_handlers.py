"""
Event handlers for the scheduling domains

Registered on the message bus by BookingsConfig.ready().
"""

import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


def log_domain_event(event: DomainEvent) -> None:
    """Write every committed domain event to the audit log"""
    logger.info(f"Domain event {event.__class__.__name__}", extra={'domain_event': event.to_dict()})

"""
Scheduling Domain Events

Events that represent things that have happened in the scheduling domains.
They are published on the message bus after the transaction commits.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from shared.domain.base import DomainEvent


# ===== Booking Events =====

@dataclass
class BookingSeriesCreated(DomainEvent):
    """
    Event: A booking submission was stored for one room

    A one-off booking is a series with a single occurrence.
    """
    series_id: UUID = None
    room_id: Any = None
    title: str = ''
    occurrences: int = 0
    first_start: datetime = None
    last_end: datetime = None


@dataclass
class BookingDeleted(DomainEvent):
    """Event: One booking row was deleted (siblings of its series are untouched)"""
    booking_id: Any = None
    room_id: Any = None


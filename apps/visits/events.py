"""Visit domain events."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from shared.domain.base import DomainEvent


@dataclass
class VisitSeriesScheduled(DomainEvent):
    """Event: A contractor or partner visit series was stored"""
    series_id: UUID = None
    kind: str = ''
    owner_id: Any = None
    occurrences: int = 0
    first_start: datetime = None
    room_id: Any = None

"""
Base Domain Classes

Building blocks shared by the scheduling domain:
- Entity: Objects with unique identity (rooms, reservations)
- ValueObject: Immutable objects compared by value (time ranges, recurrence rules)
- Aggregate: Consistency boundaries that collect domain events
- DomainEvent: Something that happened (a series was booked, a visit was scheduled)
"""

from abc import ABC
from dataclasses import dataclass, field, fields
from datetime import date, datetime, timezone
from typing import List
from uuid import UUID, uuid4


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Entity(ABC):
    """
    Base class for all entities

    Entities have unique identity and are mutable.
    Two entities are equal if their IDs are equal.
    """
    id: UUID = field(default_factory=uuid4)

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return False
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass


@dataclass
class Aggregate(Entity):
    """
    Base class for aggregate roots

    Aggregates are the consistency boundaries of the domain. The room schedule
    is one: every occurrence of a submission is reserved through it so that
    siblings of a series are checked against each other.
    """
    _events: List['DomainEvent'] = field(default_factory=list, repr=False, init=False)

    def add_event(self, event: 'DomainEvent'):
        """Add a domain event to be published after commit"""
        self._events.append(event)

    def clear_events(self):
        """Clear all collected events (called by the unit of work)"""
        self._events.clear()

    @property
    def events(self) -> List['DomainEvent']:
        """Get copy of collected events"""
        return self._events.copy()


def _serialize(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_serialize(item) for item in value]
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    return value


@dataclass
class DomainEvent:
    """
    Base class for domain events

    Events are collected on aggregates and handed to the message bus once the
    surrounding transaction has committed.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=_utcnow)
    aggregate_id: UUID | None = None

    def to_dict(self) -> dict:
        """Convert event to a JSON friendly dictionary (used for structured logs)"""
        payload = {
            'event_id': str(self.event_id),
            'event_type': self.__class__.__name__,
            'occurred_at': self.occurred_at.isoformat(),
            'aggregate_id': str(self.aggregate_id) if self.aggregate_id else None,
        }
        for item in fields(self):
            if item.name in payload:
                continue
            payload[item.name] = _serialize(getattr(self, item.name))
        return payload

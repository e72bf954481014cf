"""
Room Schedule Aggregate and Conflict Checker

This is the aggregate that prevents double bookings.
Every occurrence of a submission is reserved through a RoomSchedule, which
holds the reservations already stored for the room plus the occurrences the
current submission has provisionally accepted. Occurrence N+1 of a series is
therefore checked against occurrence N as well as against stored bookings.

The checker never queries storage. The orchestrator loads the candidate set
with a range query (room = X AND start < window.end AND end > window.start)
and the checker re-validates it here.
"""

from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Any, Iterable, List, Tuple
from uuid import UUID, uuid4

from shared.domain.base import Aggregate, Entity
from shared.domain.dates import format_clock
from shared.domain.exceptions import BookingConflictError
from shared.domain.value_objects import TimeRange
from apps.bookings.domain.recurrence import RecurrenceRule


@dataclass(eq=False)
class Reservation(Entity):
    """
    A stored or provisional reservation of a resource

    Bookings, contractor visits and guest visits all reduce to this shape.
    resource_id is None for events that do not occupy a room.
    """
    resource_id: Any = None
    period: TimeRange | None = None
    title: str = ''
    owner_id: Any = None
    recurrence: RecurrenceRule = field(default_factory=RecurrenceRule.none)
    provisional: bool = False

    def __post_init__(self):
        if self.period is None:
            raise ValueError("Reservation must have a period")

    @classmethod
    def from_record(cls, record: dict, *, resource_field: str = 'room_id') -> 'Reservation':
        """Build a reservation from a bookings table row"""
        return cls(
            id=record['id'],
            resource_id=record.get(resource_field),
            period=TimeRange(record['start_time'], record['end_time']),
            title=record.get('title') or '',
            owner_id=record.get('user_id'),
            recurrence=RecurrenceRule.from_dict(record.get('recurrence_pattern')),
        )


@dataclass(frozen=True)
class Conflict:
    """A candidate occurrence that overlaps an existing reservation"""
    resource_id: Any
    resource_name: str
    candidate: TimeRange
    existing: Reservation

    @property
    def message(self) -> str:
        tz: tzinfo = self.candidate.start.tzinfo
        start = self.existing.period.start.astimezone(tz)
        end = self.existing.period.end.astimezone(tz)
        day = self.candidate.start.strftime('%B %d, %Y')
        if self.existing.provisional:
            return (
                f"Time conflict on {day}: {self.resource_name} is booked twice by this series "
                f"({format_clock(start)} to {format_clock(end)})."
            )
        booked = f'"{self.existing.title}" ' if self.existing.title else ''
        return (
            f"Time conflict on {day}: {self.resource_name} already booked {booked}"
            f"from {format_clock(start)} to {format_clock(end)}."
        )


def same_resource(a, b) -> bool:
    """Compare resource ids by value, so a UUID matches its string form"""
    return a is not None and b is not None and str(a) == str(b)


def has_conflict(resource_id, candidate: TimeRange, existing: Iterable[Reservation]) -> bool:
    """
    Check if candidate overlaps any reservation of the same resource

    Stops at the first match. A reservation without a resource never conflicts.
    """
    if resource_id is None:
        return False
    return any(
        same_resource(reservation.resource_id, resource_id) and reservation.period.overlaps_with(candidate)
        for reservation in existing
    )


def find_conflicts(resource_id, candidate: TimeRange, existing: Iterable[Reservation]) -> List[Reservation]:
    """Collect every reservation of the same resource that overlaps candidate, in input order"""
    if resource_id is None:
        return []
    return [
        reservation for reservation in existing
        if same_resource(reservation.resource_id, resource_id) and reservation.period.overlaps_with(candidate)
    ]


@dataclass(eq=False)
class RoomSchedule(Aggregate):
    """
    RoomSchedule Aggregate Root

    Key invariants:
    - No overlapping reservations for the same room (half-open intervals)
    - Provisional reservations of the current submission count as taken

    Usage:
        schedule = RoomSchedule(resource_id=room_id, resource_name='Board Room',
                                reservations=[Reservation.from_record(r) for r in rows])
        conflicts = schedule.reserve_series(occurrences, title='Standup')
        if conflicts:
            raise BookingConflictError(conflicts)
    """

    resource_id: Any = None
    resource_name: str = 'Room'
    reservations: List[Reservation] = field(default_factory=list)

    def can_reserve(self, period: TimeRange) -> bool:
        """Return True when period is free in this room"""
        return not has_conflict(self.resource_id, period, self.reservations)

    def conflicts_for(self, period: TimeRange) -> List[Conflict]:
        return [
            Conflict(self.resource_id, self.resource_name, period, reservation)
            for reservation in find_conflicts(self.resource_id, period, self.reservations)
        ]

    def reserve(self, period: TimeRange, **details) -> Reservation:
        """
        Provisionally reserve a period

        Raises:
            BookingConflictError: If the period overlaps a stored or provisional reservation
        """
        conflicts = self.conflicts_for(period)
        if conflicts:
            raise BookingConflictError(conflicts)

        reservation = Reservation(
            id=uuid4(),
            resource_id=self.resource_id,
            period=period,
            provisional=True,
            **details,
        )
        self.reservations.append(reservation)
        return reservation

    def reserve_series(self, periods: Iterable[TimeRange], **details) -> List[Conflict]:
        """
        Reserve every occurrence of a series that fits

        Returns the conflicts of the occurrences that did not fit (empty when
        the whole series was accepted). Only the first conflicting reservation
        is reported per occurrence.
        """
        conflicts: List[Conflict] = []
        for period in periods:
            clashing = self.conflicts_for(period)
            if clashing:
                conflicts.append(clashing[0])
                continue
            self.reserve(period, **details)
        return conflicts

    @property
    def pending(self) -> List[Reservation]:
        """Reservations accepted by the current submission, in reservation order"""
        return [reservation for reservation in self.reservations if reservation.provisional]

    def record_series(self, series_id: UUID, title: str) -> None:
        """Emit the event announcing the pending occurrences as a booked series"""
        from apps.bookings.domain.events import BookingSeriesCreated

        pending = self.pending
        if not pending:
            return
        self.add_event(BookingSeriesCreated(
            aggregate_id=self.id,
            series_id=series_id,
            room_id=self.resource_id,
            title=title,
            occurrences=len(pending),
            first_start=pending[0].period.start,
            last_end=pending[-1].period.end,
        ))

    def release(self, reservation_id) -> Reservation:
        """
        Remove one reservation from the schedule

        Raises:
            ValueError: If no reservation with that id is held
        """
        from apps.bookings.domain.events import BookingDeleted

        for reservation in self.reservations:
            if str(reservation.id) == str(reservation_id):
                self.reservations.remove(reservation)
                self.add_event(BookingDeleted(
                    aggregate_id=self.id,
                    booking_id=reservation.id,
                    room_id=self.resource_id,
                ))
                return reservation
        raise ValueError(f"Reservation {reservation_id} not found in {self}")

    def __str__(self):
        return f"RoomSchedule(room={self.resource_id}, reservations={len(self.reservations)})"


def window_of(periods: Iterable[TimeRange]) -> Tuple[Any, Any]:
    """Earliest start and latest end of a non-empty collection of ranges"""
    periods = list(periods)
    return min(p.start for p in periods), max(p.end for p in periods)

"""
Booking Command Handlers

These are the use cases for room bookings.
They combine the recurrence generator and the room schedule aggregate and
write through the injected table client.

Commands:
- CreateBookingCommand: Book one or more rooms, optionally as a recurring series
- DeleteBookingCommand: Delete a single booking row
"""

from dataclasses import dataclass, field
from datetime import datetime
from itertools import islice
from typing import Any, List, Sequence
from uuid import uuid4
import logging

from shared.application import tables
from shared.application.config import scheduling_setting
from shared.application.tables import AbstractTableClient, Record
from shared.application.uow import DjangoUnitOfWork
from shared.application.validation import BOOKING_FORM_RULES, validate_form
from shared.domain.exceptions import BookingConflictError, SubmissionValidationError
from shared.domain.value_objects import TimeRange
from apps.bookings.domain.recurrence import RecurrenceRule, add_months, iter_occurrences
from apps.bookings.domain.schedule import Conflict, Reservation, RoomSchedule, window_of

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """
    Command to book rooms

    Every room receives every occurrence of the series. cap bounds a
    recurring series without an end date; the handler's configured cap
    applies when it is omitted.
    """
    room_ids: Sequence[Any]
    title: str
    start: datetime
    end: datetime
    authorizer: str = ''
    description: str = ''
    user_id: str | None = None
    recurrence: RecurrenceRule = field(default_factory=RecurrenceRule.none)
    cap: datetime | None = None


@dataclass
class DeleteBookingCommand:
    """Command to delete one occurrence; the rest of its series is kept"""
    booking_id: Any


# ===== Helpers =====

def expand_occurrences(
    base: TimeRange,
    rule: RecurrenceRule,
    *,
    cap: datetime,
    max_occurrences: int,
) -> List[TimeRange]:
    """
    Generate the occurrences of a submission and enforce the size limit

    Raises:
        SubmissionValidationError: If the rule cannot be expanded or yields
            more than max_occurrences occurrences
    """
    try:
        occurrences = list(islice(iter_occurrences(base, rule, cap=cap), max_occurrences + 1))
    except ValueError as e:
        raise SubmissionValidationError({'recurrence': str(e)}) from e

    if len(occurrences) > max_occurrences:
        raise SubmissionValidationError(
            {'recurrence': f"A series cannot have more than {max_occurrences} occurrences"}
        )
    return occurrences


def load_room_schedule(client: AbstractTableClient, room: Record, periods: List[TimeRange]) -> RoomSchedule:
    """Load the bookings of a room that overlap the window spanned by periods"""
    window_start, window_end = window_of(periods)
    rows = client.select(
        tables.BOOKINGS,
        {
            'room_id': room['id'],
            'start_time__lt': window_end,
            'end_time__gt': window_start,
        },
        order_by=('start_time',),
    )
    return RoomSchedule(
        resource_id=room['id'],
        resource_name=room.get('name') or 'Room',
        reservations=[Reservation.from_record(row) for row in rows],
    )


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command

    Strategy:
    1. Validate the form (before any persistence call)
    2. Generate occurrences (configured cap when the rule has no end date)
    3. Per room: range-query stored bookings and reserve every occurrence
       in a RoomSchedule, so siblings are checked against each other too
    4. Any conflict in any room rejects the whole submission, nothing is written
    5. Insert all rows in one batch inside a unit of work
    6. Publish BookingSeriesCreated events after commit

    The stored-bookings check and the insert are not atomic across clients;
    two concurrent submissions can still both pass step 3.
    """

    def __init__(
        self,
        table_client: AbstractTableClient,
        *,
        recurrence_cap_months: int | None = None,
        max_occurrences: int | None = None,
        bus=None,
    ):
        self.client = table_client
        self.recurrence_cap_months = (
            recurrence_cap_months
            if recurrence_cap_months is not None
            else scheduling_setting('BOOKING_RECURRENCE_CAP_MONTHS')
        )
        self.max_occurrences = (
            max_occurrences if max_occurrences is not None else scheduling_setting('MAX_OCCURRENCES')
        )
        self.bus = bus

    def handle(self, command: CreateBookingCommand) -> List[Record]:
        """
        Handle booking creation

        Returns: The stored booking rows, grouped by room then by time

        Raises:
            SubmissionValidationError: If the form is invalid or a room does not exist
            BookingConflictError: If any occurrence overlaps a booking of the same room
            PersistenceError: If the insert fails
        """
        room_ids = list(dict.fromkeys(command.room_ids or ()))
        logger.info(
            f"Creating booking '{command.title}' for rooms {room_ids}, "
            f"{command.start} - {command.end}, recurrence {command.recurrence.type.value}"
        )

        errors = validate_form(
            {
                'room_ids': room_ids,
                'authorizer': command.authorizer,
                'title': command.title,
                'start': command.start,
                'end': command.end,
            },
            BOOKING_FORM_RULES,
        )
        if errors:
            raise SubmissionValidationError(errors)

        try:
            base = TimeRange(command.start, command.end)
        except ValueError as e:
            raise SubmissionValidationError({'start': str(e)}) from e
        cap = command.cap or add_months(base.start, self.recurrence_cap_months)
        occurrences = expand_occurrences(
            base, command.recurrence, cap=cap, max_occurrences=self.max_occurrences
        )

        rooms = self._load_rooms(room_ids)

        schedules: List[RoomSchedule] = []
        conflicts: List[Conflict] = []
        for room in rooms:
            schedule = load_room_schedule(self.client, room, occurrences)
            conflicts.extend(schedule.reserve_series(
                occurrences,
                title=command.title,
                owner_id=command.user_id,
                recurrence=command.recurrence,
            ))
            schedules.append(schedule)

        if conflicts:
            logger.warning(
                f"Booking '{command.title}' rejected: {len(conflicts)} conflicting occurrence(s)"
            )
            raise BookingConflictError(conflicts)

        series_id = uuid4()
        rows = [
            self._row(command, schedule.resource_id, reservation.period, series_id)
            for schedule in schedules
            for reservation in schedule.pending
        ]

        with DjangoUnitOfWork(bus=self.bus) as uow:
            created = self.client.insert(tables.BOOKINGS, rows)
            for schedule in schedules:
                schedule.record_series(series_id, command.title)
                uow.collect_events(schedule)

        logger.info(
            f"Booked {len(created)} occurrence(s) of '{command.title}' "
            f"in {len(schedules)} room(s) (series {series_id})"
        )
        return created

    def _load_rooms(self, room_ids: List[Any]) -> List[Record]:
        found = {str(room['id']): room for room in self.client.select(tables.ROOMS, {'id__in': room_ids})}
        missing = [str(room_id) for room_id in room_ids if str(room_id) not in found]
        if missing:
            raise SubmissionValidationError({'room_ids': f"Unknown room(s): {', '.join(missing)}"})
        return [found[str(room_id)] for room_id in room_ids]

    @staticmethod
    def _row(command: CreateBookingCommand, room_id, period: TimeRange, series_id) -> dict:
        return {
            'room_id': room_id,
            'user_id': command.user_id,
            'title': command.title.strip(),
            'description': command.description or '',
            'start_time': period.start,
            'end_time': period.end,
            'is_recurring': command.recurrence.is_recurring,
            'recurrence_pattern': command.recurrence.to_dict(),
            'series_id': series_id,
            'authorizer': command.authorizer,
        }


class DeleteBookingHandler:
    """
    Handler for deleting one booking row

    Only the given occurrence is removed; other rows of its series stay.
    """

    def __init__(self, table_client: AbstractTableClient, *, bus=None):
        self.client = table_client
        self.bus = bus

    def handle(self, command: DeleteBookingCommand) -> bool:
        """Delete the booking; returns False when it did not exist"""
        record = self.client.get(tables.BOOKINGS, command.booking_id)
        if record is None:
            logger.warning(f"Booking {command.booking_id} not found, nothing to delete")
            return False

        schedule = RoomSchedule(
            resource_id=record.get('room_id'),
            reservations=[Reservation.from_record(record)],
        )
        with DjangoUnitOfWork(bus=self.bus) as uow:
            self.client.delete(tables.BOOKINGS, record['id'])
            schedule.release(record['id'])
            uow.collect_events(schedule)

        logger.info(f"Booking {command.booking_id} deleted")
        return True

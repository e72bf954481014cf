"""
Visit Command Handlers

Contractor/volunteer visits and partner guest visits are submitted through
one handler, parameterised by a VisitKind describing the tables and labels
of each flavour.

Submission order:
1. Validate the form (before any persistence call)
2. Resolve the existing owner, or plan to create a new one
3. Generate occurrences (12 months by default when there is no end date)
4. When a room is requested, check every occurrence for room conflicts
5. Insert the owner (if new), the visit rows, then the room bookings

The table client is not assumed to be transactional. If the room bookings
cannot be stored, the visit rows and the just-created owner are deleted
again and a PersistenceError is raised.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, List, Optional
import logging

from shared.application import tables
from shared.application.config import facility_timezone, scheduling_setting
from shared.application.tables import AbstractTableClient, Record
from shared.application.uow import DjangoUnitOfWork
from shared.application.validation import (
    CONTRACTOR_VISIT_FORM_RULES,
    GUEST_VISIT_FORM_RULES,
    RuleTable,
    validate_form,
)
from shared.domain.dates import combine_local, parse_clock, pin_to_midday_utc
from shared.domain.exceptions import BookingConflictError, PersistenceError, SubmissionValidationError
from shared.domain.value_objects import TimeRange
from apps.bookings.application.command_handlers import expand_occurrences, load_room_schedule
from apps.bookings.domain.recurrence import RecurrenceRule, add_months
from apps.visits.domain import VisitSeries

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VisitKind:
    """Tables and wording of one visit flavour"""
    name: str
    label: str
    owner_label: str
    owner_table: str
    owner_field: str
    visit_table: str
    rules: RuleTable
    allows_full_day: bool = False

    def booking_title(self, owner_name: str, purpose: str = '') -> str:
        if self.name == 'guest':
            return f"{owner_name} - Guest Visit"
        return f"{owner_name} - {purpose or 'Visit'}"


CONTRACTOR_VISIT = VisitKind(
    name='contractor',
    label='Contractor visit',
    owner_label='contractor',
    owner_table=tables.CONTRACTORS,
    owner_field='contractor_id',
    visit_table=tables.CONTRACTOR_VISITS,
    rules=CONTRACTOR_VISIT_FORM_RULES,
)

GUEST_VISIT = VisitKind(
    name='guest',
    label='Guest visit',
    owner_label='partner',
    owner_table=tables.PARTNERS,
    owner_field='partner_id',
    visit_table=tables.GUEST_VISITS,
    rules=GUEST_VISIT_FORM_RULES,
    allows_full_day=True,
)


# ===== Commands =====

@dataclass
class ScheduleVisitCommand:
    """
    Command to schedule a (possibly recurring) visit

    Either owner_id names an existing contractor/partner, or is_new_owner is
    set and the owner_* fields describe the one to create.
    """
    visit_date: date
    start_time: Optional[time | str] = None
    end_time: Optional[time | str] = None
    is_full_day: bool = False
    owner_id: Any = None
    is_new_owner: bool = False
    owner_name: str = ''
    owner_company: str = ''
    owner_email: str = ''
    owner_phone: str = ''
    owner_type: str = 'contractor'
    purpose: str = ''
    guest_details: str = ''
    authorizer: str = ''
    recurrence: RecurrenceRule = field(default_factory=RecurrenceRule.none)
    include_room_booking: bool = False
    room_id: Any = None
    room_booking_title: str = ''
    cap: datetime | None = None


@dataclass
class ScheduledVisits:
    """Result of a visit submission"""
    series_id: Any
    owner: Record
    visits: List[Record]
    bookings: List[Record] = field(default_factory=list)


# ===== Command Handlers =====

class ScheduleVisitHandler:
    """
    Handler for ScheduleVisit command

    Args:
        table_client: Persistence collaborator
        kind: CONTRACTOR_VISIT or GUEST_VISIT
        recurrence_cap_months: Bound for series without an end date
        max_occurrences: Largest accepted series
    """

    def __init__(
        self,
        table_client: AbstractTableClient,
        kind: VisitKind,
        *,
        recurrence_cap_months: int | None = None,
        max_occurrences: int | None = None,
        bus=None,
    ):
        self.client = table_client
        self.kind = kind
        self.recurrence_cap_months = (
            recurrence_cap_months
            if recurrence_cap_months is not None
            else scheduling_setting('VISIT_RECURRENCE_CAP_MONTHS')
        )
        self.max_occurrences = (
            max_occurrences if max_occurrences is not None else scheduling_setting('MAX_OCCURRENCES')
        )
        self.bus = bus

    def handle(self, command: ScheduleVisitCommand) -> ScheduledVisits:
        """
        Handle a visit submission

        Raises:
            SubmissionValidationError: If the form is invalid
            BookingConflictError: If a requested room is taken for any occurrence
            PersistenceError: If a write fails (after compensation)
        """
        logger.info(
            f"Scheduling {self.kind.label.lower()} on {command.visit_date} "
            f"(recurrence {command.recurrence.type.value}, room booking {command.include_room_booking})"
        )
        self._validate(command)

        start_clock, end_clock = self._clock_times(command)
        tz = facility_timezone()
        try:
            base = TimeRange(
                combine_local(command.visit_date, start_clock, tz),
                combine_local(command.visit_date, end_clock, tz),
            )
        except ValueError as e:
            raise SubmissionValidationError({'end_time': str(e)}) from e

        cap = command.cap or add_months(base.start, self.recurrence_cap_months)
        occurrences = expand_occurrences(
            base, command.recurrence, cap=cap, max_occurrences=self.max_occurrences
        )

        owner = None if command.is_new_owner else self._existing_owner(command.owner_id)
        owner_name = command.owner_name.strip() if command.is_new_owner else owner['name']

        schedule = None
        if command.include_room_booking:
            room = self.client.get(tables.ROOMS, command.room_id)
            if room is None:
                raise SubmissionValidationError({'room_id': "Please select a valid room"})
            schedule = load_room_schedule(self.client, room, occurrences)
            conflicts = schedule.reserve_series(
                occurrences,
                title=command.room_booking_title or self.kind.booking_title(owner_name, command.purpose),
                recurrence=command.recurrence,
            )
            if conflicts:
                logger.warning(
                    f"{self.kind.label} for {owner_name} rejected: "
                    f"room {room['name']} has {len(conflicts)} conflicting occurrence(s)"
                )
                raise BookingConflictError(conflicts)

        series = VisitSeries(kind=self.kind.name, occurrences=occurrences)

        with DjangoUnitOfWork(bus=self.bus) as uow:
            created_owner = None
            if owner is None:
                created_owner = owner = self.client.insert_one(self.kind.owner_table, self._owner_row(command))
                logger.info(f"Created {self.kind.owner_label} {owner['id']} ({owner_name})")
            series.owner_id = owner['id']

            try:
                visits = self.client.insert(
                    self.kind.visit_table,
                    [
                        self._visit_row(command, owner, owner_name, occurrence, series.id)
                        for occurrence in occurrences
                    ],
                )
            except PersistenceError:
                self._compensate([], created_owner)
                raise

            bookings: List[Record] = []
            if schedule is not None:
                try:
                    bookings = self.client.insert(
                        tables.BOOKINGS,
                        [
                            self._booking_row(command, schedule.resource_id, reservation, series.id)
                            for reservation in schedule.pending
                        ],
                    )
                except PersistenceError as e:
                    logger.error(
                        f"Room booking for {self.kind.label.lower()} series {series.id} failed, "
                        f"removing {len(visits)} visit(s): {e}"
                    )
                    self._compensate(visits, created_owner)
                    raise PersistenceError(
                        f"{self.kind.label} was not saved because the room booking failed",
                        e.detail or str(e),
                    ) from e
                schedule.record_series(series.id, bookings[0]['title'])
                uow.collect_events(schedule)

            series.mark_scheduled(room_id=schedule.resource_id if schedule else None)
            uow.collect_events(series)

        logger.info(
            f"Scheduled {len(visits)} {self.kind.label.lower()}(s) for {owner_name} "
            f"(series {series.id}, {len(bookings)} room booking(s))"
        )
        return ScheduledVisits(series_id=series.id, owner=owner, visits=visits, bookings=bookings)

    # ----- steps -----

    def _validate(self, command: ScheduleVisitCommand) -> None:
        values = {
            'visit_date': command.visit_date,
            'start_time': command.start_time,
            'end_time': command.end_time,
            'is_full_day': command.is_full_day,
            'authorizer': command.authorizer,
            'include_room_booking': command.include_room_booking,
            'room_id': command.room_id,
            'owner_id': command.owner_id,
            'is_new_owner': command.is_new_owner,
            'owner_name': command.owner_name,
            'owner_email': command.owner_email,
            'owner_phone': command.owner_phone,
            'owner_type': command.owner_type,
        }
        errors = validate_form(values, self.kind.rules) or {}
        if command.is_full_day and not self.kind.allows_full_day:
            errors['is_full_day'] = f"Full-day visits are not available for {self.kind.owner_label}s"
        if errors:
            raise SubmissionValidationError(errors)

    def _clock_times(self, command: ScheduleVisitCommand) -> tuple[time, time]:
        if command.is_full_day:
            start, end = scheduling_setting('FULL_DAY_VISIT_HOURS')
        else:
            start, end = command.start_time, command.end_time
        return parse_clock(start), parse_clock(end)

    def _existing_owner(self, owner_id) -> Record:
        owner = self.client.get(self.kind.owner_table, owner_id)
        if owner is None:
            raise SubmissionValidationError({'owner_id': f"Unknown {self.kind.owner_label} {owner_id}"})
        return owner

    def _owner_row(self, command: ScheduleVisitCommand) -> dict:
        row = {
            'name': command.owner_name.strip(),
            'company': command.owner_company or None,
            'email': command.owner_email or None,
            'phone': command.owner_phone or None,
        }
        if self.kind.name == 'contractor':
            row['type'] = command.owner_type or 'contractor'
        return row

    def _visit_row(self, command, owner: Record, owner_name: str, occurrence: TimeRange, series_id) -> dict:
        row = {
            self.kind.owner_field: owner['id'],
            'visit_date': pin_to_midday_utc(
                occurrence.start.date(), scheduling_setting('VISIT_DATE_PIN_HOUR_UTC')
            ),
            'start_time': None if command.is_full_day else occurrence.start.time(),
            'end_time': None if command.is_full_day else occurrence.end.time(),
            'purpose': command.purpose or None,
            'status': 'scheduled',
            'is_recurring': command.recurrence.is_recurring,
            'recurrence_pattern': command.recurrence.to_dict(),
            'series_id': series_id,
            'authorizer': command.authorizer,
        }
        if self.kind.name == 'guest':
            row['partner_name'] = owner_name
            row['guest_details'] = command.guest_details or None
        return row

    @staticmethod
    def _booking_row(command: ScheduleVisitCommand, room_id, reservation, series_id) -> dict:
        return {
            'room_id': room_id,
            'user_id': None,
            'title': reservation.title,
            'description': command.purpose or '',
            'start_time': reservation.period.start,
            'end_time': reservation.period.end,
            'is_recurring': command.recurrence.is_recurring,
            'recurrence_pattern': command.recurrence.to_dict(),
            'series_id': series_id,
            'authorizer': command.authorizer,
        }

    def _compensate(self, visits: List[Record], created_owner: Record | None) -> None:
        """Delete rows written by a submission that could not be completed"""
        for visit in visits:
            try:
                self.client.delete(self.kind.visit_table, visit['id'])
            except PersistenceError as e:
                logger.error(f"Could not remove {self.kind.visit_table} row {visit['id']}: {e}")
        if created_owner is not None:
            try:
                self.client.delete(self.kind.owner_table, created_owner['id'])
            except PersistenceError as e:
                logger.error(f"Could not remove {self.kind.owner_table} row {created_owner['id']}: {e}")
        logger.error(
            f"Compensated failed {self.kind.label.lower()}: removed {len(visits)} visit(s)"
            + (f" and {self.kind.owner_label} {created_owner['id']}" if created_owner else "")
        )

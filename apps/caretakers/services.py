"""Weekend caretaker assignment services."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, Mapping

from shared.application import tables
from shared.application.tables import AbstractTableClient, Record
from shared.application.uow import DjangoUnitOfWork
from shared.domain.dates import parse_clock
from shared.domain.exceptions import SubmissionValidationError

from .domain import SATURDAY, SUNDAY, WEEKEND_DAYS, Shift, WeekendRota, weekend_saturday

logger = logging.getLogger(__name__)


def _complete_shifts(rows: Iterable[Mapping[str, Any]], day: str) -> list[Shift]:
    """Drop rows missing a caretaker or a time, parse the rest."""
    shifts = []
    for row in rows or ():
        if not (row.get("caretaker_id") and row.get("start_time") and row.get("end_time")):
            continue
        try:
            shifts.append(
                Shift(
                    caretaker_id=row["caretaker_id"],
                    start_time=parse_clock(row["start_time"]),
                    end_time=parse_clock(row["end_time"]),
                    notes=row.get("notes") or None,
                    id=row.get("id") or None,
                )
            )
        except ValueError as exc:
            raise SubmissionValidationError({day: f"{day.capitalize()}: {exc}"}) from exc
    return shifts


def list_weekend_assignments(client: AbstractTableClient, weekend_date: date) -> list[Record]:
    """Stored shifts of the weekend containing weekend_date, Saturday first."""
    try:
        saturday = weekend_saturday(weekend_date)
    except ValueError as exc:
        raise SubmissionValidationError({"weekend_date": str(exc)}) from exc
    return client.select(
        tables.WEEKEND_ASSIGNMENTS,
        {"weekend_start_date": saturday},
        order_by=("day_of_week", "start_time"),
    )


def save_weekend_assignments(
    client: AbstractTableClient,
    weekend_date: date,
    saturday: Iterable[Mapping[str, Any]] = (),
    sunday: Iterable[Mapping[str, Any]] = (),
    *,
    bus=None,
) -> list[Record]:
    """Replace the rota of one weekend.

    Rows with an id update the stored shift, rows without one are inserted,
    and stored shifts of the weekend that were not submitted are deleted.
    Incomplete rows are ignored. Overlapping shifts on the same day reject
    the whole rota before anything is written.
    """
    try:
        weekend_start = weekend_saturday(weekend_date)
    except ValueError as exc:
        raise SubmissionValidationError({"weekend_date": str(exc)}) from exc

    rota = WeekendRota(
        saturday=weekend_start,
        shifts={SATURDAY: _complete_shifts(saturday, SATURDAY), SUNDAY: _complete_shifts(sunday, SUNDAY)},
    )
    errors = rota.validate()
    if errors:
        logger.warning(f"Weekend rota for {weekend_start} rejected: {errors}")
        raise SubmissionValidationError(errors)

    submitted = [(day, shift) for day in WEEKEND_DAYS for shift in rota.shifts[day]]

    caretaker_ids = {str(shift.caretaker_id) for _, shift in submitted}
    known = {str(row["id"]) for row in client.select(tables.CARETAKERS, {"id__in": list(caretaker_ids)})}
    unknown = sorted(caretaker_ids - known)
    if unknown:
        raise SubmissionValidationError({"caretaker_id": f"Unknown caretaker(s): {', '.join(unknown)}"})

    current = {str(row["id"]): row for row in client.select(tables.WEEKEND_ASSIGNMENTS, {"weekend_start_date": weekend_start})}
    stale = [str(shift.id) for _, shift in submitted if shift.id and str(shift.id) not in current]
    if stale:
        raise SubmissionValidationError({"id": f"Assignment(s) not found for this weekend: {', '.join(stale)}"})

    keep: set[str] = set()
    new_rows = []
    with DjangoUnitOfWork(bus=bus) as uow:
        for day, shift in submitted:
            values = {
                "caretaker_id": shift.caretaker_id,
                "day_of_week": day,
                "start_time": shift.start_time,
                "end_time": shift.end_time,
                "notes": shift.notes,
            }
            if shift.id:
                keep.add(str(shift.id))
                client.update(tables.WEEKEND_ASSIGNMENTS, shift.id, values)
            else:
                new_rows.append({"weekend_start_date": weekend_start, **values})

        client.insert(tables.WEEKEND_ASSIGNMENTS, new_rows)

        removed = [record_id for record_id in current if record_id not in keep]
        for record_id in removed:
            client.delete(tables.WEEKEND_ASSIGNMENTS, current[record_id]["id"])

        rota.record_saved(updated=len(keep), created=len(new_rows), removed=len(removed))
        uow.collect_events(rota)

    logger.info(
        f"Saved weekend rota {weekend_start}: {len(keep)} updated, "
        f"{len(new_rows)} created, {len(removed)} removed"
    )
    return list_weekend_assignments(client, weekend_start)

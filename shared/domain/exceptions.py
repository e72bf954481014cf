"""
Scheduling error taxonomy

- SubmissionValidationError: the submitted form is incomplete or invalid
- BookingConflictError: an occurrence overlaps an existing reservation
- PersistenceError: the table client failed (network, constraint violation)

Validation and conflict errors are user-facing and are raised before any
write. Persistence errors carry the underlying detail and are never retried.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.bookings.domain.schedule import Conflict


class SchedulingError(Exception):
    """Base class for errors raised while scheduling rooms and visits."""


class SubmissionValidationError(SchedulingError):
    """Raised when a submission fails validation."""

    def __init__(self, errors: dict[str, str] | str):
        if isinstance(errors, str):
            errors = {"non_field_errors": errors}
        self.errors = dict(errors)
        super().__init__("; ".join(self.errors.values()))


class BookingConflictError(SchedulingError):
    """Raised when one or more occurrences overlap existing reservations."""

    def __init__(self, conflicts: Iterable["Conflict"]):
        self.conflicts = list(conflicts)
        super().__init__("\n".join(conflict.message for conflict in self.conflicts))

    @property
    def messages(self) -> list[str]:
        return [conflict.message for conflict in self.conflicts]


class PersistenceError(SchedulingError):
    """Raised when the persistence collaborator fails."""

    def __init__(self, message: str, detail: str = ""):
        self.detail = detail
        super().__init__(f"{message}: {detail}" if detail else message)

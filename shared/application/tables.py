"""
Table Client

The persistence collaborator of the scheduling core: a generic,
table-oriented client with insert / update / delete / select over the named
tables of the facility database. Records are plain dictionaries keyed by
column name (foreign keys appear as "<name>_id"); identifiers and created_at
timestamps are assigned by the store.

Clients are constructed explicitly and handed to the command handlers.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

ROOMS = 'rooms'
BOOKINGS = 'bookings'
CONTRACTORS = 'contractors'
CONTRACTOR_VISITS = 'contractor_visits'
PARTNERS = 'partners'
GUEST_VISITS = 'guest_visits'
CARETAKERS = 'caretakers'
WEEKEND_ASSIGNMENTS = 'weekend_assignments'

TABLES = (
    ROOMS,
    BOOKINGS,
    CONTRACTORS,
    CONTRACTOR_VISITS,
    PARTNERS,
    GUEST_VISITS,
    CARETAKERS,
    WEEKEND_ASSIGNMENTS,
)

Record = dict


class AbstractTableClient(ABC):
    """
    Abstract persistence client

    Filters use Django lookup syntax: {"room_id": x, "start_time__lt": end,
    "id__in": [...]}. Implementations raise PersistenceError when the
    underlying store fails.
    """

    @abstractmethod
    def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> list[Record]:
        """Insert rows in one batch and return the stored records"""

    @abstractmethod
    def update(self, table: str, record_id: Any, patch: Mapping[str, Any]) -> Record:
        """Apply a partial update to one record and return it"""

    @abstractmethod
    def delete(self, table: str, record_id: Any) -> None:
        """Delete one record (no cascade to related rows of a series)"""

    @abstractmethod
    def select(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        order_by: Sequence[str] = (),
    ) -> list[Record]:
        """Return the records matching every filter"""

    def insert_one(self, table: str, row: Mapping[str, Any]) -> Record:
        return self.insert(table, [row])[0]

    def get(self, table: str, record_id: Any) -> Record | None:
        rows = self.select(table, {'id': record_id})
        return rows[0] if rows else None

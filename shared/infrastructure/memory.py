"""
In-memory table client

A dictionary-backed implementation of AbstractTableClient used by the unit
tests and for dry runs. It understands the subset of Django lookups the
handlers use: exact, lt, lte, gt, gte, in, isnull and icontains.
"""

from copy import deepcopy
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Sequence
from uuid import UUID, uuid4

from shared.application.tables import TABLES, AbstractTableClient, Record
from shared.domain.exceptions import PersistenceError


def _key(value):
    # UUIDs and their string form compare equal, as they do through the ORM
    return str(value) if isinstance(value, UUID) else value


def _ordered(value, other, compare: Callable[[Any, Any], bool]) -> bool:
    if value is None or other is None:
        return False
    return compare(value, other)


LOOKUPS: Dict[str, Callable[[Any, Any], bool]] = {
    'exact': lambda value, arg: _key(value) == _key(arg),
    'lt': lambda value, arg: _ordered(value, arg, lambda a, b: a < b),
    'lte': lambda value, arg: _ordered(value, arg, lambda a, b: a <= b),
    'gt': lambda value, arg: _ordered(value, arg, lambda a, b: a > b),
    'gte': lambda value, arg: _ordered(value, arg, lambda a, b: a >= b),
    'in': lambda value, arg: _key(value) in {_key(item) for item in arg},
    'isnull': lambda value, arg: (value is None) == bool(arg),
    'icontains': lambda value, arg: value is not None and str(arg).lower() in str(value).lower(),
}


class InMemoryTableClient(AbstractTableClient):
    """
    Table client keeping every table in a list of dicts

    Identifiers (uuid4) and created_at are assigned on insert, like the
    database does. Returned records are copies.
    """

    def __init__(self, data: Mapping[str, Sequence[Mapping[str, Any]]] | None = None):
        self._tables: Dict[str, List[Record]] = {table: [] for table in TABLES}
        for table, rows in (data or {}).items():
            self.insert(table, rows)

    def _rows(self, table: str) -> List[Record]:
        try:
            return self._tables[table]
        except KeyError:
            raise PersistenceError(f"Unknown table {table!r}") from None

    def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> list[Record]:
        stored = self._rows(table)
        created = []
        for row in rows:
            record = {'id': uuid4(), 'created_at': datetime.now(timezone.utc), **deepcopy(dict(row))}
            stored.append(record)
            created.append(deepcopy(record))
        return created

    def update(self, table: str, record_id: Any, patch: Mapping[str, Any]) -> Record:
        for record in self._rows(table):
            if _key(record['id']) == _key(record_id):
                record.update(deepcopy(dict(patch)))
                return deepcopy(record)
        raise PersistenceError(f"{table} record {record_id} not found")

    def delete(self, table: str, record_id: Any) -> None:
        stored = self._rows(table)
        stored[:] = [record for record in stored if _key(record['id']) != _key(record_id)]

    def select(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        order_by: Sequence[str] = (),
    ) -> list[Record]:
        matches = [record for record in self._rows(table) if self._matches(record, filters or {})]
        # Stable sorts applied last key first give a multi-key ordering
        for term in reversed(order_by):
            name = term.lstrip('-')
            matches.sort(
                key=lambda record: (record.get(name) is None, record.get(name)),
                reverse=term.startswith('-'),
            )
        return deepcopy(matches)

    @staticmethod
    def _matches(record: Record, filters: Mapping[str, Any]) -> bool:
        for expression, arg in filters.items():
            name, _, lookup = expression.partition('__')
            lookup = lookup or 'exact'
            if lookup not in LOOKUPS:
                raise ValueError(f"Unsupported lookup {lookup!r} in {expression!r}")
            if not LOOKUPS[lookup](record.get(name), arg):
                return False
        return True

    def count(self, table: str) -> int:
        return len(self._rows(table))

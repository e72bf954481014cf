"""
Django ORM table client

Maps the table names of the facility database onto the Django models that
own them. Every call runs in its own atomic block (a savepoint when the
caller already holds a transaction), and database failures surface as
PersistenceError with the driver message as detail.
"""

from typing import Any, Mapping, Sequence
import logging

from django.apps import apps  # type: ignore
from django.db import DatabaseError, transaction  # type: ignore

from shared.application import tables
from shared.application.tables import AbstractTableClient, Record
from shared.domain.exceptions import PersistenceError

logger = logging.getLogger(__name__)

DEFAULT_TABLE_MODELS = {
    tables.ROOMS: 'rooms.Room',
    tables.BOOKINGS: 'bookings.Booking',
    tables.CONTRACTORS: 'visits.Contractor',
    tables.CONTRACTOR_VISITS: 'visits.ContractorVisit',
    tables.PARTNERS: 'visits.Partner',
    tables.GUEST_VISITS: 'visits.GuestVisit',
    tables.CARETAKERS: 'caretakers.Caretaker',
    tables.WEEKEND_ASSIGNMENTS: 'caretakers.WeekendAssignment',
}


class DjangoTableClient(AbstractTableClient):
    """
    Table client backed by the Django ORM

    Args:
        table_models: table name -> "app_label.ModelName"
        using: Database alias
    """

    def __init__(self, table_models: Mapping[str, str] | None = None, *, using: str = 'default'):
        self.table_models = dict(table_models or DEFAULT_TABLE_MODELS)
        self.using = using

    def model_for(self, table: str):
        try:
            label = self.table_models[table]
        except KeyError:
            raise PersistenceError(f"Unknown table {table!r}") from None
        return apps.get_model(label)

    @staticmethod
    def to_record(instance) -> Record:
        """Flatten a model instance to {column: value}; foreign keys as <name>_id"""
        return {field.attname: getattr(instance, field.attname) for field in instance._meta.concrete_fields}

    def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> list[Record]:
        model = self.model_for(table)
        if not rows:
            return []
        try:
            with transaction.atomic(using=self.using):
                instances = [model(**dict(row)) for row in rows]
                created = model.objects.using(self.using).bulk_create(instances)
        except DatabaseError as e:
            logger.error(f"Insert of {len(rows)} rows into {table} failed: {e}")
            raise PersistenceError(f"Failed to insert into {table}", str(e)) from e

        logger.debug(f"Inserted {len(created)} rows into {table}")
        return [self.to_record(instance) for instance in created]

    def update(self, table: str, record_id: Any, patch: Mapping[str, Any]) -> Record:
        model = self.model_for(table)
        try:
            with transaction.atomic(using=self.using):
                instance = model.objects.using(self.using).select_for_update().get(pk=record_id)
                for name, value in patch.items():
                    setattr(instance, name, value)
                instance.save(using=self.using, update_fields=list(patch) or None)
        except model.DoesNotExist:
            raise PersistenceError(f"{table} record {record_id} not found") from None
        except DatabaseError as e:
            logger.error(f"Update of {table} record {record_id} failed: {e}")
            raise PersistenceError(f"Failed to update {table}", str(e)) from e
        return self.to_record(instance)

    def delete(self, table: str, record_id: Any) -> None:
        model = self.model_for(table)
        try:
            with transaction.atomic(using=self.using):
                model.objects.using(self.using).filter(pk=record_id).delete()
        except DatabaseError as e:
            logger.error(f"Delete of {table} record {record_id} failed: {e}")
            raise PersistenceError(f"Failed to delete from {table}", str(e)) from e

    def select(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        order_by: Sequence[str] = (),
    ) -> list[Record]:
        model = self.model_for(table)
        queryset = model.objects.using(self.using).filter(**dict(filters or {}))
        if order_by:
            queryset = queryset.order_by(*order_by)
        try:
            return [self.to_record(instance) for instance in queryset]
        except DatabaseError as e:
            logger.error(f"Select from {table} failed: {e}")
            raise PersistenceError(f"Failed to read {table}", str(e)) from e

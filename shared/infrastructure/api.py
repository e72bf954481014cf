"""
REST adapters for the scheduling core

Views obtain their table client from get_table_client() and run handlers
inside scheduling_errors_as_api_errors(), which maps the scheduling error
taxonomy onto DRF responses:

- SubmissionValidationError -> 400 with field errors
- BookingConflictError -> 400 with every conflict in non_field_errors
- PersistenceError -> 503 with the failure detail
"""

from contextlib import contextmanager
import logging

from rest_framework import serializers, status  # type: ignore
from rest_framework.exceptions import APIException  # type: ignore

from shared.application.tables import AbstractTableClient
from shared.domain.exceptions import BookingConflictError, PersistenceError, SubmissionValidationError
from shared.infrastructure.django_tables import DjangoTableClient

logger = logging.getLogger(__name__)


class StorageUnavailable(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "The scheduling database is unavailable, please try again later."
    default_code = "storage_unavailable"


def get_table_client() -> AbstractTableClient:
    """Table client used by the HTTP layer"""
    return DjangoTableClient()


@contextmanager
def scheduling_errors_as_api_errors():
    try:
        yield
    except SubmissionValidationError as exc:
        raise serializers.ValidationError({field: [message] for field, message in exc.errors.items()}) from exc
    except BookingConflictError as exc:
        raise serializers.ValidationError({"non_field_errors": exc.messages}) from exc
    except PersistenceError as exc:
        logger.error(f"Scheduling request failed in storage: {exc}")
        raise StorageUnavailable(detail=str(exc)) from exc

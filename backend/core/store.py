"""
Table-level read/insert/update/list operations.

Business flows talk to the database only through these helpers so every
database failure reaches them as a ``StoreError`` carrying a message and a
code, never as a driver-specific exception.
"""
import logging

from django.core.exceptions import ObjectDoesNotExist, ValidationError as DjangoValidationError
from django.db import DatabaseError

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A read or write against the store failed"""

    def __init__(self, message, code='store_error'):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self):
        return f"[{self.code}] {self.message}"


class NotFound(StoreError):
    """The requested row does not exist"""

    def __init__(self, model_name, pk):
        super().__init__(f"{model_name} {pk} does not exist", code='not_found')
        self.model_name = model_name
        self.pk = pk


def read_one(model, pk, for_update=False):
    """Fetch a single row by primary key. Raises NotFound when missing."""
    queryset = model.objects.all()
    if for_update:
        queryset = queryset.select_for_update()
    try:
        return queryset.get(pk=pk)
    except (ObjectDoesNotExist, DjangoValidationError):
        raise NotFound(model.__name__, pk)
    except DatabaseError as e:
        raise StoreError(str(e), code='read_failed') from e


def insert(model, record):
    """Insert a row built from ``record`` and return the saved instance"""
    try:
        return model.objects.create(**record)
    except DatabaseError as e:
        raise StoreError(str(e), code='insert_failed') from e


def update(model, pk, fields, conditions=None):
    """
    Update ``fields`` on the row identified by ``pk``.

    ``conditions`` are extra lookups the row must satisfy at write time, so a
    caller can express compare-and-set updates. Returns the number of rows
    changed (0 when the row is gone or a condition no longer holds).
    """
    try:
        return model.objects.filter(pk=pk, **(conditions or {})).update(**fields)
    except DatabaseError as e:
        raise StoreError(str(e), code='update_failed') from e


def list_rows(model, filters=None, order=None):
    """Return a queryset of rows matching ``filters``, sorted by ``order``"""
    queryset = model.objects.filter(**(filters or {}))
    if order:
        queryset = queryset.order_by(*order)
    return queryset

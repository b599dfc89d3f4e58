"""
Custom Application Exceptions
"""
from dataclasses import dataclass
from typing import Optional


class CatalogException(Exception):
    """Base exception for the materials exchange"""
    pass


class ParseError(CatalogException):
    """Raised when an uploaded inventory document is empty or unreadable"""
    pass


class InvalidQueryError(CatalogException):
    """Raised for unknown columns, modes, page sizes or page indexes"""
    pass


class RecordNotFoundError(CatalogException):
    """Raised when the store has no record with the requested id"""

    def __init__(self, record_id):
        super().__init__(f"Inventory record {record_id} not found")
        self.record_id = record_id


class StoreError(CatalogException):
    """
    Raised when the record store fails.

    The message is the store's own message and is passed to the caller
    unmodified.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PartialReplaceError(StoreError):
    """
    Insert phase of a bulk replace failed after the delete phase committed.

    The tenant's slice is empty or partially populated until the replace
    is run again.
    """

    severity = "critical"

    def __init__(
        self,
        message: str,
        tenant_key: str,
        deleted_count: int,
        inserted_count: int,
        expected_count: int,
    ):
        super().__init__(message)
        self.tenant_key = tenant_key
        self.deleted_count = deleted_count
        self.inserted_count = inserted_count
        self.expected_count = expected_count


class ReplaceInProgressError(CatalogException):
    """Raised when a bulk replace for the same tenant is already running"""

    def __init__(self, tenant_key: str):
        super().__init__(f"Bulk replace already in progress for {tenant_key}")
        self.tenant_key = tenant_key


@dataclass(frozen=True)
class StaleFilterState:
    """
    A filter entry whose value is no longer offered for its column.

    Not raised: the catalog drops the entry and reports it as data.
    """
    column: str
    value: str
    reason: Optional[str] = "value not present in current partition"

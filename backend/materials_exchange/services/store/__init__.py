"""
Record store adapters
"""
from .base import RecordStore, WRITABLE_FIELDS
from .sql_store import SqlRecordStore

__all__ = ["RecordStore", "SqlRecordStore", "WRITABLE_FIELDS"]

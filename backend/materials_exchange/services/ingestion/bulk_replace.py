"""
Bulk Replace Ingestor

Replaces a tenant's whole inventory slice with the rows of an uploaded
document: delete every row of the tenant, then insert the parsed rows in
batches.
"""
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from materials_exchange.core.config import settings
from materials_exchange.core.exceptions import (
    InvalidQueryError, PartialReplaceError, ReplaceInProgressError, StoreError
)
from materials_exchange.services.store.base import RecordStore
from .journal import ReplaceJournal
from .parser import parse_inventory_document

logger = logging.getLogger(__name__)


@dataclass
class BulkReplaceResult:
    deleted_count: int
    inserted_count: int
    transactional: bool = True


class TenantReplaceGuard:
    """One replace in flight per tenant; a second one is rejected"""

    def __init__(self):
        self._lock = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def _tenant_lock(self, tenant_key: str) -> threading.Lock:
        with self._lock:
            return self._locks.setdefault(tenant_key, threading.Lock())

    def is_running(self, tenant_key: str) -> bool:
        return self._tenant_lock(tenant_key).locked()

    @contextmanager
    def hold(self, tenant_key: str) -> Iterator[None]:
        lock = self._tenant_lock(tenant_key)
        if not lock.acquire(blocking=False):
            raise ReplaceInProgressError(tenant_key)
        try:
            yield
        finally:
            lock.release()


# Shared by every ingestor in the process
replace_guard = TenantReplaceGuard()


class BulkReplaceIngestor:
    """
    Tenant slice replacement from an uploaded document.

    With ``transactional`` the delete and all insert batches run in one
    transaction. Without it, the delete commits first and a failure while
    inserting leaves the slice empty or partial; that case raises
    PartialReplaceError and is recorded in the replace journal.
    """

    def __init__(
        self,
        store: RecordStore,
        batch_size: Optional[int] = None,
        transactional: Optional[bool] = None,
        journal: Optional[ReplaceJournal] = None,
        guard: Optional[TenantReplaceGuard] = None,
    ):
        self.store = store
        self.batch_size = settings.BULK_INSERT_BATCH_SIZE if batch_size is None else batch_size
        if not 1 <= self.batch_size <= 500:
            raise ValueError("batch_size must be between 1 and 500")
        self.transactional = (
            settings.BULK_REPLACE_TRANSACTIONAL if transactional is None else transactional
        )
        self.journal = journal
        self.guard = guard or replace_guard

    def replace(self, tenant_key: str, document_text: Optional[str]) -> BulkReplaceResult:
        """
        Replace every record of ``tenant_key`` with the document's rows.

        Raises:
            ParseError: nothing is deleted
            ReplaceInProgressError: another replace for the tenant is running
            StoreError: store failure before anything was removed
            PartialReplaceError: insert failure after the delete committed
        """
        tenant_key = (tenant_key or "").strip()
        if not tenant_key:
            raise InvalidQueryError("Tenant key is required for bulk replace")

        rows = parse_inventory_document(document_text, tenant_key)

        with self.guard.hold(tenant_key):
            if self.journal:
                unfinished = self.journal.pending(tenant_key)
                if unfinished:
                    logger.warning(
                        f"Previous replace for {tenant_key} did not finish "
                        f"({unfinished.inserted_count}/{unfinished.expected_count} inserted); "
                        f"replacing again"
                    )

            logger.info(f"Replacing inventory of {tenant_key} with {len(rows)} rows")
            if self.transactional:
                deleted, inserted = self.store.replace_slice(tenant_key, rows, self.batch_size)
                if self.journal:
                    self.journal.resolve(tenant_key)
            else:
                deleted, inserted = self._replace_in_phases(tenant_key, rows)

        logger.info(f"Replaced inventory of {tenant_key}: deleted {deleted}, inserted {inserted}")
        return BulkReplaceResult(
            deleted_count=deleted,
            inserted_count=inserted,
            transactional=self.transactional,
        )

    def _replace_in_phases(self, tenant_key: str, rows) -> tuple:
        # Phase 1: a StoreError here leaves the slice untouched
        deleted = len(self.store.delete_where(tenant_key))

        # Phase 2: the slice is already gone, every failure from here on is partial
        entry = None
        inserted = 0
        try:
            if self.journal:
                entry = self.journal.begin(tenant_key, deleted, len(rows))
            else:
                logger.info(f"Replace for {tenant_key}: deleted {deleted}, about to insert {len(rows)}")
            for start in range(0, len(rows), self.batch_size):
                batch = rows[start:start + self.batch_size]
                self.store.insert_batch(batch)
                inserted += len(batch)
                logger.debug(f"Inserted batch of {len(batch)} rows for {tenant_key}")
                if entry is not None:
                    self.journal.progress(entry, inserted)
        except StoreError as e:
            if entry is not None:
                self.journal.fail(entry, e.message, inserted)
            logger.critical(
                f"Inventory of {tenant_key} left incomplete: deleted {deleted}, "
                f"inserted {inserted} of {len(rows)}: {e.message}"
            )
            raise PartialReplaceError(
                e.message,
                tenant_key=tenant_key,
                deleted_count=deleted,
                inserted_count=inserted,
                expected_count=len(rows),
            ) from e

        if entry is not None:
            self.journal.complete(entry)
        return deleted, inserted

    def pending_replace(self, tenant_key: str):
        """Unfinished non-transactional replace for ``tenant_key``, if any"""
        if not self.journal:
            return None
        return self.journal.pending(tenant_key)

"""
SQLAlchemy implementation of the record store
"""
import logging
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from materials_exchange.core.exceptions import RecordNotFoundError, StoreError
from materials_exchange.models.inventory import InventoryRecord
from .base import RecordStore, writable_values

logger = logging.getLogger(__name__)


def _store_message(error: SQLAlchemyError) -> str:
    return str(getattr(error, "orig", None) or error)


class SqlRecordStore(RecordStore):
    """
    Inventory store on a SQLAlchemy session.

    Each write commits on its own; failures are rolled back and raised as
    StoreError.
    """

    def __init__(self, db: Session):
        self.db = db

    def _fail(self, operation: str, error: SQLAlchemyError) -> StoreError:
        self.db.rollback()
        message = _store_message(error)
        logger.error(f"Store error during {operation}: {message}")
        return StoreError(message)

    def list_all(self) -> List[InventoryRecord]:
        try:
            return list(
                self.db.execute(select(InventoryRecord).order_by(InventoryRecord.id)).scalars()
            )
        except SQLAlchemyError as e:
            raise self._fail("list_all", e)

    def get_by_id(self, record_id: int) -> Optional[InventoryRecord]:
        try:
            return self.db.get(InventoryRecord, record_id)
        except SQLAlchemyError as e:
            raise self._fail("get_by_id", e)

    def update_one(self, record_id: int, patch: Mapping[str, Any]) -> InventoryRecord:
        values = writable_values(patch)
        record = self.get_by_id(record_id)
        if record is None:
            raise RecordNotFoundError(record_id)
        try:
            for field, value in values.items():
                setattr(record, field, value)
            self.db.commit()
            self.db.refresh(record)
            return record
        except SQLAlchemyError as e:
            raise self._fail("update_one", e)

    def delete_one(self, record_id: int) -> None:
        record = self.get_by_id(record_id)
        if record is None:
            raise RecordNotFoundError(record_id)
        try:
            self.db.delete(record)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete_one", e)

    def insert_one(self, record: Mapping[str, Any]) -> InventoryRecord:
        try:
            created = InventoryRecord(**writable_values(record))
            self.db.add(created)
            self.db.commit()
            self.db.refresh(created)
            return created
        except SQLAlchemyError as e:
            raise self._fail("insert_one", e)

    def delete_where(self, tenant_key: str) -> List[int]:
        try:
            deleted = self._delete_tenant(tenant_key)
            self.db.commit()
            return deleted
        except SQLAlchemyError as e:
            raise self._fail("delete_where", e)

    def insert_batch(self, records: Sequence[Mapping[str, Any]]) -> None:
        if not records:
            return
        try:
            self._insert(records)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("insert_batch", e)

    def update_where(self, tenant_key: str, patch: Mapping[str, Any]) -> int:
        values = writable_values(patch)
        try:
            result = self.db.execute(
                update(InventoryRecord)
                .where(InventoryRecord.tenant_key == tenant_key)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
            # Loaded instances would otherwise keep the old values
            self.db.expire_all()
            return result.rowcount
        except SQLAlchemyError as e:
            raise self._fail("update_where", e)

    def replace_slice(
        self,
        tenant_key: str,
        records: Sequence[Mapping[str, Any]],
        batch_size: int,
    ) -> Tuple[int, int]:
        inserted = 0
        try:
            deleted = self._delete_tenant(tenant_key)
            for start in range(0, len(records), batch_size):
                batch = records[start:start + batch_size]
                self._insert(batch)
                inserted += len(batch)
                logger.debug(f"Staged batch of {len(batch)} rows for {tenant_key}")
            self.db.commit()
            return len(deleted), inserted
        except SQLAlchemyError as e:
            raise self._fail("replace_slice", e)

    def _delete_tenant(self, tenant_key: str) -> List[int]:
        ids = list(
            self.db.execute(
                select(InventoryRecord.id).where(InventoryRecord.tenant_key == tenant_key)
            ).scalars()
        )
        if ids:
            self.db.execute(
                delete(InventoryRecord)
                .where(InventoryRecord.tenant_key == tenant_key)
                .execution_options(synchronize_session=False)
            )
        return ids

    def _insert(self, records: Sequence[Mapping[str, Any]]) -> None:
        self.db.execute(
            insert(InventoryRecord),
            [writable_values(r) for r in records],
        )

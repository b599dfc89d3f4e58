"""
Tests for the SQL Record Store
Single-record and tenant-wide operations against SQLite
"""
import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from materials_exchange.core.exceptions import RecordNotFoundError, StoreError
from materials_exchange.models.inventory import InventoryRecord
from materials_exchange.services.store import SqlRecordStore


def tenant_count(db: Session, tenant_key: str) -> int:
    return db.query(InventoryRecord).filter(InventoryRecord.tenant_key == tenant_key).count()


class TestSingleRecordOperations:
    """Reads and writes of one record"""

    def test_list_all_in_id_order(self, db_session: Session, sample_records):
        """Every record, ordered by id"""
        records = SqlRecordStore(db_session).list_all()

        assert [r.id for r in records] == sorted(r.id for r in sample_records)

    def test_get_by_id(self, db_session: Session, sample_records):
        """Existing and missing ids"""
        store = SqlRecordStore(db_session)

        assert store.get_by_id(sample_records[0].id).material_code == 500001
        assert store.get_by_id(9999) is None

    def test_insert_one_assigns_id(self, db_session: Session):
        """The store assigns the id"""
        record = SqlRecordStore(db_session).insert_one(
            {"tenant_key": "2000", "material_name": "Болт М12", "quantity": "100"}
        )

        assert record.id is not None
        assert record.profitability is None

    def test_insert_unknown_field_rejected(self, db_session: Session):
        """Only inventory columns are written"""
        with pytest.raises(ValueError, match="Unknown inventory fields"):
            SqlRecordStore(db_session).insert_one({"tenant_key": "2000", "price": "1"})

    def test_update_one(self, db_session: Session, sample_records):
        """Patch is applied and returned"""
        record = SqlRecordStore(db_session).update_one(sample_records[0].id, {"quantity": "1 100"})

        assert record.quantity == "1 100"
        assert record.material_name == "Труба 57x3,5"

    def test_update_missing_record(self, db_session: Session):
        """Unknown id raises RecordNotFoundError"""
        with pytest.raises(RecordNotFoundError):
            SqlRecordStore(db_session).update_one(42, {"quantity": "1"})

    def test_delete_one(self, db_session: Session, sample_records):
        """Record is gone afterwards"""
        store = SqlRecordStore(db_session)
        record_id = sample_records[0].id

        store.delete_one(record_id)

        assert store.get_by_id(record_id) is None

    def test_delete_missing_record(self, db_session: Session):
        """Unknown id raises RecordNotFoundError"""
        with pytest.raises(RecordNotFoundError):
            SqlRecordStore(db_session).delete_one(42)


class TestTenantOperations:
    """Operations over a tenant's slice"""

    def test_delete_where_returns_deleted_ids(self, db_session: Session, sample_records):
        """Only the tenant's rows are removed"""
        expected = [r.id for r in sample_records if r.tenant_key == "3000"]

        deleted = SqlRecordStore(db_session).delete_where("3000")

        assert sorted(deleted) == sorted(expected)
        assert tenant_count(db_session, "3000") == 0
        assert tenant_count(db_session, "2000") == 2

    def test_insert_batch(self, db_session: Session):
        """All rows land in one call"""
        rows = [{"tenant_key": "5000", "material_name": f"Позиция {i}"} for i in range(7)]

        SqlRecordStore(db_session).insert_batch(rows)

        assert tenant_count(db_session, "5000") == 7

    def test_update_where_touches_tenant_only(self, db_session: Session, sample_records):
        """Other tenants keep their values"""
        store = SqlRecordStore(db_session)

        updated = store.update_where("2000", {"profitability": 12.5})

        assert updated == 2
        values = {r.tenant_key: r.profitability for r in store.list_all()}
        assert values["2000"] == 12.5
        assert values["3000"] is None

    def test_replace_slice(self, db_session: Session, sample_records):
        """Delete and insert in one transaction"""
        rows = [{"tenant_key": "4000", "material_name": f"Новая {i}"} for i in range(3)]

        deleted, inserted = SqlRecordStore(db_session).replace_slice("4000", rows, batch_size=2)

        assert (deleted, inserted) == (2, 3)
        assert tenant_count(db_session, "4000") == 3
        assert tenant_count(db_session, "2000") == 2


class TestStoreErrors:
    """Backend failures surface as StoreError"""

    def test_failure_rolls_back_and_keeps_message(self, db_session: Session, sample_records, monkeypatch):
        """The backend's own message is passed through"""
        store = SqlRecordStore(db_session)

        def broken_execute(*args, **kwargs):
            raise OperationalError("DELETE", {}, Exception("database is locked"))

        monkeypatch.setattr(db_session, "execute", broken_execute)

        with pytest.raises(StoreError) as exc_info:
            store.delete_where("2000")

        assert exc_info.value.message == "database is locked"

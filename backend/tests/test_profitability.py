"""
Tests for Profitability Propagation
One value stored on every record of a balance unit
"""
import pytest
from sqlalchemy.orm import Session

from materials_exchange.core.exceptions import InvalidQueryError
from materials_exchange.models.inventory import InventoryRecord
from materials_exchange.services.catalog import CatalogRow
from materials_exchange.services.profitability import ProfitabilityAnnotator
from materials_exchange.services.store import SqlRecordStore


def profitability_by_tenant(db: Session):
    result = {}
    for record in db.query(InventoryRecord).all():
        result.setdefault(record.tenant_key, set()).add(record.profitability)
    return result


class TestSetProfitability:
    """Propagation across a tenant's slice"""

    def test_comma_decimal(self, db_session: Session, sample_records):
        """'12,5' is stored as 12.5 on every row of the tenant"""
        updated = ProfitabilityAnnotator(SqlRecordStore(db_session)).set_profitability("2000", "12,5")

        assert updated == 2
        values = profitability_by_tenant(db_session)
        assert values["2000"] == {12.5}
        assert values["3000"] == {None}

    def test_invalid_value_clears(self, db_session: Session, sample_records):
        """'abc' is stored as null"""
        annotator = ProfitabilityAnnotator(SqlRecordStore(db_session))
        annotator.set_profitability("3000", 8)

        annotator.set_profitability("3000", "abc")

        assert profitability_by_tenant(db_session)["3000"] == {None}

    def test_zero_is_kept(self, db_session: Session, sample_records):
        """0 is a value, not a missing one"""
        ProfitabilityAnnotator(SqlRecordStore(db_session)).set_profitability("4000", "0")

        assert profitability_by_tenant(db_session)["4000"] == {0.0}

    def test_unknown_tenant_touches_nothing(self, db_session: Session, sample_records):
        """A tenant without rows updates zero records"""
        updated = ProfitabilityAnnotator(SqlRecordStore(db_session)).set_profitability("9999", "5")

        assert updated == 0

    def test_empty_tenant_rejected(self, db_session: Session):
        """A tenant key is required"""
        with pytest.raises(InvalidQueryError):
            ProfitabilityAnnotator(SqlRecordStore(db_session)).set_profitability("", "5")

    def test_row_shows_propagated_value(self, db_session: Session, sample_records):
        """Catalog rows display the stored number"""
        store = SqlRecordStore(db_session)
        ProfitabilityAnnotator(store).set_profitability("2000", "15")

        rows = [CatalogRow.from_record(r) for r in store.list_all() if r.tenant_key == "2000"]

        assert {r.profitability for r in rows} == {"15"}

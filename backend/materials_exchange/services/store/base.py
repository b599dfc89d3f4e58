"""
Record Store Adapter
Interface to the persistent inventory table
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from materials_exchange.models.inventory import InventoryRecord

# Columns a caller may write; id is assigned by the store
WRITABLE_FIELDS = (
    "tenant_key", "company_name", "receipt_date", "warehouse_address",
    "material_class", "class_name", "material_subclass", "subclass_name",
    "material_code", "material_name", "unit", "quantity", "cost",
    "stock_price", "profitability",
)


class RecordStore(ABC):
    """
    Base class for inventory record stores.

    Every method may raise StoreError carrying the backend's message.
    """

    @abstractmethod
    def list_all(self) -> List[InventoryRecord]:
        """All records in store order"""

    @abstractmethod
    def get_by_id(self, record_id: int) -> Optional[InventoryRecord]:
        """One record, None if absent"""

    @abstractmethod
    def update_one(self, record_id: int, patch: Mapping[str, Any]) -> InventoryRecord:
        """Apply ``patch`` to one record and return it"""

    @abstractmethod
    def delete_one(self, record_id: int) -> None:
        """Delete one record"""

    @abstractmethod
    def insert_one(self, record: Mapping[str, Any]) -> InventoryRecord:
        """Insert one record and return it with its id"""

    @abstractmethod
    def delete_where(self, tenant_key: str) -> List[int]:
        """Delete every record of ``tenant_key``; returns the deleted ids"""

    @abstractmethod
    def insert_batch(self, records: Sequence[Mapping[str, Any]]) -> None:
        """Insert records in one round trip"""

    @abstractmethod
    def update_where(self, tenant_key: str, patch: Mapping[str, Any]) -> int:
        """Apply ``patch`` to every record of ``tenant_key`` in one statement"""

    @abstractmethod
    def replace_slice(
        self,
        tenant_key: str,
        records: Sequence[Mapping[str, Any]],
        batch_size: int,
    ) -> Tuple[int, int]:
        """
        Delete the tenant's records and insert ``records`` in one
        transaction. Returns (deleted_count, inserted_count).
        """


def writable_values(values: Mapping[str, Any]) -> Dict[str, Any]:
    """Keep known columns only"""
    unknown = set(values) - set(WRITABLE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown inventory fields: {', '.join(sorted(unknown))}")
    return dict(values)

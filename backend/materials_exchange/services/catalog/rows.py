"""
Catalog rows and the viewing tenant
"""
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Tuple


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _number_text(value: Optional[float]) -> str:
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class CatalogRow:
    """
    Read-only string view of an inventory record.

    Missing values are empty strings so that every cell can be compared,
    trimmed and displayed the same way.
    """
    id: int
    tenant_key: str = ""
    company_name: str = ""
    receipt_date: str = ""
    warehouse_address: str = ""
    material_class: str = ""
    class_name: str = ""
    material_subclass: str = ""
    subclass_name: str = ""
    material_code: str = ""
    material_name: str = ""
    unit: str = ""
    quantity: str = ""
    cost: str = ""
    profitability: str = ""

    @classmethod
    def from_record(cls, record: Any) -> "CatalogRow":
        """Build from an ORM record or any object with the same attributes"""
        profitability = getattr(record, "profitability", None)
        return cls(
            id=record.id,
            tenant_key=_text(record.tenant_key),
            company_name=_text(record.company_name),
            receipt_date=_text(record.receipt_date),
            warehouse_address=_text(record.warehouse_address),
            material_class=_text(record.material_class),
            class_name=_text(record.class_name),
            material_subclass=_text(record.material_subclass),
            subclass_name=_text(record.subclass_name),
            material_code=_text(record.material_code),
            material_name=_text(record.material_name),
            unit=_text(record.unit),
            quantity=_text(record.quantity),
            cost=_text(record.cost),
            profitability=_number_text(profitability),
        )

    def value(self, column: str) -> str:
        return getattr(self, column)


def to_rows(records: Iterable[Any]) -> List[CatalogRow]:
    return [r if isinstance(r, CatalogRow) else CatalogRow.from_record(r) for r in records]


@dataclass(frozen=True)
class Viewer:
    """
    The tenant looking at the catalog.

    Fixed for the duration of a session.
    """
    tenant_key: str = ""
    warehouses: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> "Viewer":
        """Accept warehouses as plain strings or as {"address": ...} objects"""
        return cls(
            tenant_key=_text(claims.get("tenant_key")).strip(),
            warehouses=normalize_warehouses(claims.get("warehouses")),
        )


def normalize_warehouses(warehouses: Optional[Iterable[Any]]) -> Tuple[str, ...]:
    addresses = []
    for warehouse in warehouses or ():
        if isinstance(warehouse, Mapping):
            warehouse = warehouse.get("address")
        addresses.append(_text(warehouse))
    return tuple(addresses)

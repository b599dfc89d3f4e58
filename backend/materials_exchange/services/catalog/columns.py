"""
Catalog column definitions
"""
from dataclasses import dataclass
from typing import Dict, FrozenSet, Tuple

from materials_exchange.core.exceptions import InvalidQueryError


@dataclass(frozen=True)
class CatalogColumn:
    key: str
    label: str
    numeric: bool = False


# Display order of the catalog table
CATALOG_COLUMNS: Tuple[CatalogColumn, ...] = (
    CatalogColumn("tenant_key", "БЕ"),
    CatalogColumn("company_name", "Наименование дочернего Общества"),
    CatalogColumn("receipt_date", "Дата поступления"),
    CatalogColumn("warehouse_address", "Адрес склада"),
    CatalogColumn("material_class", "Класс МТР"),
    CatalogColumn("class_name", "Наименование класса"),
    CatalogColumn("material_subclass", "Подкласс МТР"),
    CatalogColumn("subclass_name", "Наименование подкласса"),
    CatalogColumn("material_code", "Код материала"),
    CatalogColumn("material_name", "Наименование материала"),
    CatalogColumn("unit", "Ед. измерения"),
    CatalogColumn("quantity", "Количество", numeric=True),
    CatalogColumn("cost", "Стоимость, руб", numeric=True),
)

COLUMNS_BY_KEY: Dict[str, CatalogColumn] = {c.key: c for c in CATALOG_COLUMNS}
COLUMN_KEYS: Tuple[str, ...] = tuple(c.key for c in CATALOG_COLUMNS)
NUMERIC_COLUMNS: FrozenSet[str] = frozenset(c.key for c in CATALOG_COLUMNS if c.numeric)


def require_column(key: str) -> CatalogColumn:
    """Look up a column, raising InvalidQueryError for unknown keys"""
    try:
        return COLUMNS_BY_KEY[key]
    except KeyError:
        raise InvalidQueryError(f"Unknown column: {key}") from None

"""
Accepted header spellings per inventory field.

Uploaded spreadsheets have been exported from several templates over the
years; the same column shows up with stray quotes, trailing spaces and
long explanatory suffixes.
"""
from typing import Dict, Iterable, List, Optional, Tuple

FIELD_HEADERS: Dict[str, Tuple[str, ...]] = {
    "tenant_key": (
        "БЕ",
        "БЕ (балансовая единица) держателя запаса",
    ),
    "company_name": (
        "Наименование дочернего Общества",
        "Наименование дочернего Общества'",
    ),
    "receipt_date": ("Дата поступления",),
    "warehouse_address": (
        "Адрес склада",
        "Адрес склада (Город, район)",
    ),
    "material_class": ("Классы МТР", "Классы МТР "),
    "class_name": ("Наименование класса", "Наименование класса '"),
    "material_subclass": ("Подклассы МТР", "Подклассы МТР "),
    "subclass_name": ("Наименование подкласса",),
    "material_code": ("КСМ (код материала)",),
    "material_name": ("Наименование материала",),
    "unit": ("БЕИ (единица измерения)",),
    "quantity": ("Количество",),
    "cost": (
        "Стоимость запасов",
        'Стоимость запасов , руб (показывается во вкладке "Складские запасы")',
        "Стоимость запасов, руб (показывается сумма для продажи)",
    ),
    "profitability": (
        "Рентабельность",
        "Плановая рентабельность",
        "Плановая рентабельность ",
        "Рентабельность (на сайте НЕ показывать)",
    ),
    "stock_price": (
        "Цена запаса",
        'Цена запаса, руб (показывается во вкладке "Мои запасы")',
    ),
}

# Canonical header written back by the CSV tools
CANONICAL_HEADERS: Dict[str, str] = {
    field: variants[0] for field, variants in FIELD_HEADERS.items()
}

# Columns dropped when preparing documents for upload
DROPPED_HEADERS: Tuple[str, ...] = ("Наименование склада",)

NUMERIC_FIELDS = ("material_class", "material_code", "profitability")
INTEGER_FIELDS = ("material_class", "material_code")


def normalize_header(header: Optional[str]) -> str:
    return (header or "").replace("'", "").replace('"', "").strip().lower()


def resolve_columns(header: Iterable[Optional[str]]) -> Dict[str, str]:
    """
    Map each field to the document column holding it.

    The first accepted spelling present in the header wins.
    """
    by_normalized: Dict[str, str] = {}
    for column in header:
        if column is None:
            continue
        by_normalized.setdefault(normalize_header(column), column)

    columns: Dict[str, str] = {}
    for field, variants in FIELD_HEADERS.items():
        for variant in variants:
            column = by_normalized.get(normalize_header(variant))
            if column is not None:
                columns[field] = column
                break
    return columns


def field_for_header(header: Optional[str]) -> Optional[str]:
    """Field a single header belongs to, None when it is not recognised"""
    resolved = resolve_columns([header])
    return next(iter(resolved), None)


def unmatched_headers(header: Iterable[Optional[str]]) -> List[str]:
    return [h for h in header if h is not None and field_for_header(h) is None]

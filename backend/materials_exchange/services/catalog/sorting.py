"""
Single-column sorting with a tri-state header toggle
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Union

from .columns import NUMERIC_COLUMNS, require_column
from .rows import CatalogRow
from .values import collation_key, parse_locale_number


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortSpec:
    column: str
    direction: SortDirection = SortDirection.ASC

    def __post_init__(self):
        require_column(self.column)
        object.__setattr__(self, "direction", SortDirection(self.direction))


def next_sort_state(current: Optional[SortSpec], clicked_column: str) -> Optional[SortSpec]:
    """
    State after a click on ``clicked_column``.

    Same column cycles unsorted -> asc -> desc -> unsorted; another column
    always starts at asc.
    """
    require_column(clicked_column)
    if current is None or current.column != clicked_column:
        return SortSpec(clicked_column, SortDirection.ASC)
    if current.direction is SortDirection.ASC:
        return SortSpec(clicked_column, SortDirection.DESC)
    return None


def sort_key(row: CatalogRow, column: str):
    value = row.value(column)
    if column in NUMERIC_COLUMNS:
        number = parse_locale_number(value)
        return 0.0 if number is None else number
    return collation_key(value)


def compare(a: CatalogRow, b: CatalogRow, column: str) -> int:
    """-1, 0 or 1 in ascending order of ``column``"""
    require_column(column)
    ka, kb = sort_key(a, column), sort_key(b, column)
    return (ka > kb) - (ka < kb)


def sort_rows(rows: Iterable[CatalogRow], spec: Optional[Union[SortSpec, tuple]]) -> List[CatalogRow]:
    """Stable sort by ``spec``; incoming order is kept when spec is None"""
    rows = list(rows)
    if spec is None:
        return rows
    if not isinstance(spec, SortSpec):
        spec = SortSpec(*spec)
    return sorted(
        rows,
        key=lambda row: sort_key(row, spec.column),
        reverse=spec.direction is SortDirection.DESC,
    )

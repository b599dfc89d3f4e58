"""
Column filters

Distinct values feed the per-column filter pickers; the active filters are
an AND of exact (trimmed) equality tests.
"""
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from materials_exchange.core.exceptions import StaleFilterState
from .columns import require_column
from .rows import CatalogRow
from .values import collation_key, parse_locale_number

logger = logging.getLogger(__name__)

FilterSet = Dict[str, str]


def _distinct_sort_key(value: str):
    # Numbers first in numeric order, then text in collation order
    number = parse_locale_number(value)
    if number is not None:
        return (0, number, ("", ""), value)
    return (1, 0.0, collation_key(value), value)


def distinct_values(rows: Iterable[CatalogRow], column: str) -> List[str]:
    """Sorted distinct non-empty values of ``column``"""
    require_column(column)
    values = {row.value(column) for row in rows}
    values = {v for v in values if v and v.strip()}
    return sorted(values, key=_distinct_sort_key)


def normalize_filters(filter_set: Optional[Mapping[str, Optional[str]]]) -> FilterSet:
    """Validate column keys and drop entries without a value"""
    normalized: FilterSet = {}
    for column, value in (filter_set or {}).items():
        require_column(column)
        if value is None or not str(value).strip():
            continue
        normalized[column] = str(value)
    return normalized


def apply_filters(rows: Iterable[CatalogRow], filter_set: Mapping[str, str]) -> List[CatalogRow]:
    """Rows whose trimmed value equals the trimmed filter value in every column"""
    wanted = {
        column: value.strip()
        for column, value in normalize_filters(filter_set).items()
    }
    if not wanted:
        return list(rows)
    return [
        row for row in rows
        if all(row.value(column).strip() == value for column, value in wanted.items())
    ]


def reconcile_filters(
    filter_set: Mapping[str, str],
    rows: Sequence[CatalogRow],
) -> Tuple[FilterSet, List[StaleFilterState]]:
    """
    Re-validate a filter set against the distinct values of ``rows``.

    Entries whose value is no longer offered are dropped and returned as
    StaleFilterState so the caller can clear them.
    """
    kept: FilterSet = {}
    dropped: List[StaleFilterState] = []
    for column, value in normalize_filters(filter_set).items():
        offered = {v.strip() for v in distinct_values(rows, column)}
        if value.strip() in offered:
            kept[column] = value
        else:
            dropped.append(StaleFilterState(column=column, value=value))
            logger.debug("Dropping stale filter %s=%r", column, value)
    return kept, dropped

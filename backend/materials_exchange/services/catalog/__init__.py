"""
Catalog engine: visibility, filters, sorting and pagination
"""
from .columns import CATALOG_COLUMNS, COLUMN_KEYS, NUMERIC_COLUMNS, CatalogColumn, require_column
from .filters import FilterSet, apply_filters, distinct_values, reconcile_filters
from .pagination import page_count, paginate, validate_page_size
from .rows import CatalogRow, Viewer, to_rows
from .sorting import SortDirection, SortSpec, compare, next_sort_state, sort_rows
from .values import collation_key, parse_locale_int, parse_locale_number
from .view import CatalogPage, CatalogView, build_catalog_page
from .visibility import VisibilityMode, partition

__all__ = [
    "CATALOG_COLUMNS", "COLUMN_KEYS", "NUMERIC_COLUMNS", "CatalogColumn", "require_column",
    "FilterSet", "apply_filters", "distinct_values", "reconcile_filters",
    "page_count", "paginate", "validate_page_size",
    "CatalogRow", "Viewer", "to_rows",
    "SortDirection", "SortSpec", "compare", "next_sort_state", "sort_rows",
    "collation_key", "parse_locale_int", "parse_locale_number",
    "CatalogPage", "CatalogView", "build_catalog_page",
    "VisibilityMode", "partition",
]

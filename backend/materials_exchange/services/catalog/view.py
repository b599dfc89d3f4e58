"""
Catalog pipeline

partition -> distinct values -> filter reconciliation -> filter -> sort -> page

``build_catalog_page`` evaluates the pipeline once for a stateless request.
``CatalogView`` keeps the inputs of one browsing session and recomputes the
derived rows whenever any of them change.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from materials_exchange.core.config import settings
from materials_exchange.core.exceptions import InvalidQueryError, StaleFilterState
from .columns import require_column
from .filters import FilterSet, apply_filters, distinct_values, reconcile_filters
from .pagination import page_count, paginate, validate_page_size
from .rows import CatalogRow, Viewer, to_rows
from .sorting import SortSpec, next_sort_state, sort_rows
from .visibility import VisibilityMode, partition, resolve_mode

logger = logging.getLogger(__name__)


@dataclass
class CatalogPage:
    items: List[CatalogRow]
    total: int
    page: int
    page_size: int
    total_pages: int
    mode: VisibilityMode
    filters: FilterSet = field(default_factory=dict)
    dropped_filters: List[StaleFilterState] = field(default_factory=list)
    sort: Optional[SortSpec] = None


def build_catalog_page(
    records: Iterable,
    viewer: Viewer,
    mode: Union[str, VisibilityMode] = VisibilityMode.MARKET,
    filters: Optional[Mapping[str, str]] = None,
    sort: Optional[SortSpec] = None,
    page: int = 0,
    page_size: Optional[int] = None,
) -> CatalogPage:
    """Run the whole pipeline over a snapshot of records"""
    mode = resolve_mode(mode)
    page_size = validate_page_size(page_size or settings.DEFAULT_PAGE_SIZE)

    visible = partition(to_rows(records), viewer, mode)
    kept, dropped = reconcile_filters(filters or {}, visible)
    if dropped:
        # Filter set changed, back to the first page
        page = 0
    result = sort_rows(apply_filters(visible, kept), sort)

    return CatalogPage(
        items=paginate(result, page, page_size),
        total=len(result),
        page=page,
        page_size=page_size,
        total_pages=page_count(len(result), page_size),
        mode=mode,
        filters=kept,
        dropped_filters=dropped,
        sort=sort,
    )


class CatalogView:
    """
    Reactive catalog state for one viewer.

    Inputs are the record snapshot, viewer, mode, filter set, sort spec
    and page window. Derived rows are cached and recomputed on first
    access after any input changes. Filter or sort changes move back to
    the first page.
    """

    def __init__(
        self,
        records: Iterable,
        viewer: Viewer,
        mode: Union[str, VisibilityMode] = VisibilityMode.MARKET,
        page_size: Optional[int] = None,
    ):
        self._snapshot: Sequence[CatalogRow] = tuple(to_rows(records))
        self.viewer = viewer
        self._mode = resolve_mode(mode)
        self._filters: FilterSet = {}
        self._sort: Optional[SortSpec] = None
        self._page = 0
        self._page_size = validate_page_size(page_size or settings.DEFAULT_PAGE_SIZE)
        self._derived: Optional[Dict] = None

    # Inputs

    @property
    def mode(self) -> VisibilityMode:
        return self._mode

    @property
    def filters(self) -> FilterSet:
        self._derive()
        return dict(self._filters)

    @property
    def sort(self) -> Optional[SortSpec]:
        return self._sort

    @property
    def page(self) -> int:
        return self._page

    @property
    def page_size(self) -> int:
        return self._page_size

    def refresh(self, records: Iterable):
        """Replace the snapshot after a write to the store"""
        self._snapshot = tuple(to_rows(records))
        self._invalidate()

    def set_mode(self, mode: Union[str, VisibilityMode]):
        mode = resolve_mode(mode)
        if mode is not self._mode:
            self._mode = mode
            self._invalidate()

    def set_filter(self, column: str, value: Optional[str]):
        """Set or, with an empty value, remove the filter on ``column``"""
        require_column(column)
        if value is None or not str(value).strip():
            self.clear_filter(column)
            return
        if self._filters.get(column) == value:
            return
        self._filters[column] = str(value)
        self._criteria_changed()

    def clear_filter(self, column: str):
        if self._filters.pop(column, None) is not None:
            self._criteria_changed()

    def clear_filters(self):
        if self._filters:
            self._filters = {}
            self._criteria_changed()

    def toggle_sort(self, column: str) -> Optional[SortSpec]:
        self.set_sort(next_sort_state(self._sort, column))
        return self._sort

    def set_sort(self, spec: Optional[SortSpec]):
        if spec != self._sort:
            self._sort = spec
            self._criteria_changed()

    def set_page(self, page: int):
        if page < 0:
            raise InvalidQueryError("Page index must be >= 0")
        self._page = page

    def set_page_size(self, page_size: int):
        self._page_size = validate_page_size(page_size)
        self._page = 0

    # Derived values

    @property
    def visible_rows(self) -> List[CatalogRow]:
        return self._derive()["visible"]

    @property
    def rows(self) -> List[CatalogRow]:
        """Filtered and sorted rows of the current partition"""
        return self._derive()["rows"]

    @property
    def total(self) -> int:
        return len(self.rows)

    @property
    def total_pages(self) -> int:
        return page_count(self.total, self._page_size)

    @property
    def page_rows(self) -> List[CatalogRow]:
        return paginate(self.rows, self._page, self._page_size)

    @property
    def dropped_filters(self) -> List[StaleFilterState]:
        """Filters cleared by the last recomputation"""
        return list(self._derive()["dropped"])

    def distinct_values(self, column: str) -> List[str]:
        return distinct_values(self.visible_rows, column)

    def current_page(self) -> CatalogPage:
        return CatalogPage(
            items=self.page_rows,
            total=self.total,
            page=self._page,
            page_size=self._page_size,
            total_pages=self.total_pages,
            mode=self._mode,
            filters=self.filters,
            dropped_filters=self.dropped_filters,
            sort=self._sort,
        )

    def _criteria_changed(self):
        self._page = 0
        self._invalidate()

    def _invalidate(self):
        self._derived = None

    def _derive(self) -> Dict:
        if self._derived is not None:
            return self._derived

        visible = partition(self._snapshot, self.viewer, self._mode)
        kept, dropped = reconcile_filters(self._filters, visible)
        if dropped:
            # Stale values are cleared, not matched against
            self._filters = kept
            self._page = 0
            logger.debug(
                "Cleared %d stale filter(s) for %s in %s mode",
                len(dropped), self.viewer.tenant_key, self._mode.value,
            )
        rows = sort_rows(apply_filters(visible, kept), self._sort)

        self._derived = {"visible": visible, "rows": rows, "dropped": dropped}
        return self._derived

"""
Catalog API Routes
Market and own-inventory browsing for the viewing tenant
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from materials_exchange.api.deps import get_current_viewer, get_store
from materials_exchange.core.exceptions import InvalidQueryError
from materials_exchange.schemas.catalog import (
    CatalogPageResponse, ColumnInfo, SortState, SortStateRequest, SortStateResponse
)
from materials_exchange.services.catalog import (
    CATALOG_COLUMNS, CatalogView, SortDirection, SortSpec, Viewer, VisibilityMode,
    build_catalog_page, next_sort_state, require_column
)
from materials_exchange.services.store import RecordStore

router = APIRouter()


def parse_filter_params(raw_filters: List[str]) -> dict:
    """``column:value`` pairs into a filter set"""
    filters = {}
    for item in raw_filters:
        column, sep, value = item.partition(":")
        if not sep:
            raise InvalidQueryError(f"Filter must be column:value, got {item!r}")
        require_column(column)
        filters[column] = value
    return filters


@router.get("", response_model=CatalogPageResponse)
async def get_catalog_page(
    mode: VisibilityMode = VisibilityMode.MARKET,
    page: int = Query(0, ge=0),
    page_size: Optional[int] = None,
    sort: Optional[str] = None,
    direction: SortDirection = SortDirection.ASC,
    filter: List[str] = Query([], description="column:value, repeatable"),
    viewer: Viewer = Depends(get_current_viewer),
    store: RecordStore = Depends(get_store),
):
    """One page of the market or of the viewer's own inventory"""
    catalog_page = build_catalog_page(
        store.list_all(),
        viewer,
        mode=mode,
        filters=parse_filter_params(filter),
        sort=SortSpec(sort, direction) if sort else None,
        page=page,
        page_size=page_size,
    )
    return CatalogPageResponse.model_validate(catalog_page)


@router.get("/columns", response_model=List[ColumnInfo])
async def list_columns():
    """Catalog columns in display order"""
    return [ColumnInfo.model_validate(column) for column in CATALOG_COLUMNS]


@router.get("/columns/{column}/values", response_model=List[str])
async def list_column_values(
    column: str,
    mode: VisibilityMode = VisibilityMode.MARKET,
    viewer: Viewer = Depends(get_current_viewer),
    store: RecordStore = Depends(get_store),
):
    """Distinct values offered by the filter picker of ``column``"""
    require_column(column)
    return CatalogView(store.list_all(), viewer, mode=mode).distinct_values(column)


@router.post("/sort-state", response_model=SortStateResponse)
async def toggle_sort_state(request: SortStateRequest):
    """Sort after a click on a column header"""
    current = (
        SortSpec(request.current.column, request.current.direction)
        if request.current else None
    )
    spec = next_sort_state(current, request.column)
    if spec is None:
        return SortStateResponse(sort=None)
    return SortStateResponse(sort=SortState.model_validate(spec))

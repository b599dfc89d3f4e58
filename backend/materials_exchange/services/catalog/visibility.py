"""
Visibility partitioning

Splits the full record set into what a tenant sees on the market tab
(offered by others) and on the "my inventory" tab (its own rows).
"""
from enum import Enum
from typing import List, Sequence, Tuple, Union

from materials_exchange.core.exceptions import InvalidQueryError
from .rows import CatalogRow, Viewer


class VisibilityMode(str, Enum):
    MARKET = "market"
    MINE = "mine"


def resolve_mode(mode: Union[str, VisibilityMode]) -> VisibilityMode:
    try:
        return VisibilityMode(mode)
    except ValueError:
        raise InvalidQueryError(f"Unknown visibility mode: {mode}") from None


def owned_addresses(viewer: Viewer) -> Tuple[str, ...]:
    """Trimmed, lower-cased, non-empty warehouse addresses of the viewer"""
    return tuple(
        address.strip().casefold()
        for address in viewer.warehouses
        if address and address.strip()
    )


def is_viewer_row(row: CatalogRow, viewer: Viewer, addresses: Tuple[str, ...]) -> bool:
    """
    True when the row belongs to the viewer by tenant or by warehouse.

    Warehouse match is substring containment, not equality: stored
    addresses may carry descriptive suffixes after the city and district.
    """
    if viewer.tenant_key and row.tenant_key == viewer.tenant_key:
        return True
    warehouse = row.warehouse_address.casefold()
    if not warehouse:
        return False
    return any(address in warehouse for address in addresses)


def partition(
    rows: Sequence[CatalogRow],
    viewer: Viewer,
    mode: Union[str, VisibilityMode],
) -> List[CatalogRow]:
    """Rows visible to ``viewer`` in ``mode``; input order is preserved"""
    mode = resolve_mode(mode)

    if mode is VisibilityMode.MINE:
        if not viewer.tenant_key:
            return []
        return [row for row in rows if row.tenant_key == viewer.tenant_key]

    addresses = owned_addresses(viewer)
    return [row for row in rows if not is_viewer_row(row, viewer, addresses)]

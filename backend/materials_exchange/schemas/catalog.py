"""
Catalog Schemas
Response models for catalog pages and column metadata
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from materials_exchange.services.catalog import SortDirection, VisibilityMode


class CatalogRowOut(BaseModel):
    id: int
    tenant_key: str
    company_name: str
    receipt_date: str
    warehouse_address: str
    material_class: str
    class_name: str
    material_subclass: str
    subclass_name: str
    material_code: str
    material_name: str
    unit: str
    quantity: str
    cost: str
    profitability: str

    model_config = ConfigDict(from_attributes=True)


class SortState(BaseModel):
    column: str
    direction: SortDirection

    model_config = ConfigDict(from_attributes=True)


class StaleFilterOut(BaseModel):
    """Filter cleared because its value is no longer offered"""
    column: str
    value: str
    reason: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class CatalogPageResponse(BaseModel):
    items: List[CatalogRowOut]
    total: int
    page: int
    page_size: int
    total_pages: int
    mode: VisibilityMode
    filters: Dict[str, str]
    dropped_filters: List[StaleFilterOut]
    sort: Optional[SortState] = None

    model_config = ConfigDict(from_attributes=True)


class ColumnInfo(BaseModel):
    key: str
    label: str
    numeric: bool

    model_config = ConfigDict(from_attributes=True)


class SortStateRequest(BaseModel):
    """Current sort and the header that was clicked"""
    column: str
    current: Optional[SortState] = None


class SortStateResponse(BaseModel):
    sort: Optional[SortState] = None

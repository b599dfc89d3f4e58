"""
Inventory Record Schemas
Pydantic models for single-record writes, bulk replace and profitability
"""
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from materials_exchange.services.catalog.values import parse_locale_int, parse_locale_number


class InventoryRecordBase(BaseModel):
    """
    Fields of one inventory record.

    Codes may be sent as text; amounts stay locale-formatted text.
    """
    # Owner
    tenant_key: Optional[str] = Field(None, max_length=32, description="Balance unit code")
    company_name: Optional[str] = Field(None, description="Subsidiary name")

    # Location
    receipt_date: Optional[str] = Field(None, max_length=32, description="Receipt date")
    warehouse_address: Optional[str] = Field(None, description="Warehouse address")

    # Classification
    material_class: Optional[int] = Field(None, description="Material class code")
    class_name: Optional[str] = None
    material_subclass: Optional[str] = Field(None, max_length=64)
    subclass_name: Optional[str] = None
    material_code: Optional[int] = Field(None, description="Material code")
    material_name: Optional[str] = None
    unit: Optional[str] = Field(None, max_length=32, description="Unit of measure")

    # Amounts
    quantity: Optional[str] = Field(None, max_length=64, description="Quantity, e.g. '1 250,5'")
    cost: Optional[str] = Field(None, max_length=64, description="Stock value, roubles")
    stock_price: Optional[str] = Field(None, max_length=64)
    profitability: Optional[float] = None

    @field_validator("material_class", "material_code", mode="before")
    @classmethod
    def parse_code(cls, v):
        """Accept codes as text; blank or unparseable is null"""
        if v is None or isinstance(v, int) and not isinstance(v, bool):
            return v
        return parse_locale_int(v)

    @field_validator("profitability", mode="before")
    @classmethod
    def parse_profitability(cls, v):
        """Locale number; anything unparseable is null"""
        return parse_locale_number(v)

    @field_validator(
        "tenant_key", "company_name", "receipt_date", "warehouse_address",
        "class_name", "material_subclass", "subclass_name", "material_name",
        "unit", "quantity", "cost", "stock_price",
    )
    @classmethod
    def blank_to_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v


class InventoryRecordCreate(InventoryRecordBase):
    """Schema for creating a record"""
    pass


class InventoryRecordUpdate(InventoryRecordBase):
    """Schema for updating a record; only the fields sent are written"""
    pass


class InventoryRecordOut(BaseModel):
    """Stored record as held by the store"""
    id: int
    tenant_key: Optional[str] = None
    company_name: Optional[str] = None
    receipt_date: Optional[str] = None
    warehouse_address: Optional[str] = None
    material_class: Optional[int] = None
    class_name: Optional[str] = None
    material_subclass: Optional[str] = None
    subclass_name: Optional[str] = None
    material_code: Optional[int] = None
    material_name: Optional[str] = None
    unit: Optional[str] = None
    quantity: Optional[str] = None
    cost: Optional[str] = None
    stock_price: Optional[str] = None
    profitability: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)


class BulkReplaceResponse(BaseModel):
    tenant_key: str
    deleted_count: int
    inserted_count: int
    transactional: bool


class PendingReplaceOut(BaseModel):
    """Unfinished replace left by an interrupted upload"""
    tenant_key: str
    phase: str
    deleted_count: int
    expected_count: int
    inserted_count: int
    error_message: Optional[str] = None
    started_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProfitabilityUpdate(BaseModel):
    value: Optional[Union[float, str]] = Field(
        None, description="Profitability, locale number such as '12,5'"
    )


class ProfitabilityResponse(BaseModel):
    tenant_key: str
    profitability: Optional[float]
    updated_count: int

"""
Inventory Models
SQLAlchemy models for the shared inventory table
"""
from sqlalchemy import (
    Column, String, Integer, BigInteger, Float, Text, DateTime, Index
)
from sqlalchemy.sql import func

from materials_exchange.core.database import Base


class InventoryRecord(Base):
    """
    Inventory Record

    One material lot held by a balance unit. Quantity and cost are kept as
    the locale-formatted text they were uploaded with; profitability is a
    balance-unit level value repeated on every row of that unit.
    """
    __tablename__ = "inventory"
    __table_args__ = (
        Index("ix_inventory_tenant_key", "tenant_key"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True, doc="Store-assigned identifier")

    # Owner
    tenant_key = Column(String(32), nullable=True, doc="Balance unit code of the owner")
    company_name = Column(Text, nullable=True, doc="Subsidiary name")

    # Location
    receipt_date = Column(String(32), nullable=True, doc="Receipt date as uploaded")
    warehouse_address = Column(Text, nullable=True, doc="Warehouse address (city, district)")

    # Classification
    material_class = Column(Integer, nullable=True, doc="Material class code")
    class_name = Column(Text, nullable=True, doc="Material class name")
    material_subclass = Column(String(64), nullable=True, doc="Material subclass code")
    subclass_name = Column(Text, nullable=True, doc="Material subclass name")
    material_code = Column(BigInteger, nullable=True, doc="Material code")
    material_name = Column(Text, nullable=True, doc="Material name")
    unit = Column(String(32), nullable=True, doc="Unit of measure")

    # Amounts (locale formatted text)
    quantity = Column(String(64), nullable=True, doc="Quantity, e.g. '1 250,5'")
    cost = Column(String(64), nullable=True, doc="Stock value, roubles")
    stock_price = Column(String(64), nullable=True, doc="Stock price, not shown in the catalog")

    # Balance-unit annotation
    profitability = Column(Float, nullable=True, doc="Planned profitability")

    def __repr__(self):
        return f"<InventoryRecord(id={self.id}, tenant_key='{self.tenant_key}')>"


class ReplaceLog(Base):
    """
    Bulk Replace Log

    Two-phase log for replaces that run without a single transaction: the
    entry is written after the delete phase commits and closed when the
    last batch is inserted.
    """
    __tablename__ = "inventory_replace_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_key = Column(String(32), nullable=False, index=True)
    phase = Column(String(16), nullable=False, default="inserting", doc="inserting, completed, failed or superseded")
    deleted_count = Column(Integer, nullable=False, default=0)
    expected_count = Column(Integer, nullable=False, default=0)
    inserted_count = Column(Integer, nullable=False, default=0)
    error_message = Column(Text, nullable=True)
    started_at = Column(DateTime, nullable=False, server_default=func.now())
    finished_at = Column(DateTime, nullable=True)

    @property
    def is_pending(self) -> bool:
        return self.phase in ("inserting", "failed")

    def __repr__(self):
        return (
            f"<ReplaceLog(tenant_key='{self.tenant_key}', phase='{self.phase}', "
            f"{self.inserted_count}/{self.expected_count})>"
        )

"""
Materials Exchange SQLAlchemy Models
"""

# Import all models to ensure they are registered with SQLAlchemy
from .inventory import InventoryRecord, ReplaceLog

__all__ = ["InventoryRecord", "ReplaceLog"]

"""
Main API Router - Consolidates all module routes
"""
from fastapi import APIRouter

from materials_exchange.api.v1 import catalog, inventory

api_router = APIRouter()

# Catalog browsing
api_router.include_router(catalog.router, prefix="/catalog", tags=["catalog"])

# Inventory maintenance
api_router.include_router(inventory.router, prefix="/inventory", tags=["inventory"])

"""
Inventory API Routes
Single-record maintenance, bulk replace uploads and profitability
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from materials_exchange.api.deps import (
    get_current_claims, get_journal, get_store, resolve_target_tenant
)
from materials_exchange.core.config import settings
from materials_exchange.core.exceptions import RecordNotFoundError
from materials_exchange.schemas.inventory import (
    BulkReplaceResponse, InventoryRecordCreate, InventoryRecordOut, InventoryRecordUpdate,
    PendingReplaceOut, ProfitabilityResponse, ProfitabilityUpdate
)
from materials_exchange.services.catalog.values import parse_locale_number
from materials_exchange.services.ingestion import (
    BulkReplaceIngestor, ReplaceJournal, decode_document
)
from materials_exchange.services.profitability import ProfitabilityAnnotator
from materials_exchange.services.store import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/upload", response_model=BulkReplaceResponse)
async def upload_inventory(
    file: UploadFile = File(...),
    tenant_key: str = Depends(resolve_target_tenant),
    store: RecordStore = Depends(get_store),
    journal: ReplaceJournal = Depends(get_journal),
):
    """Replace the tenant's whole inventory with the uploaded document"""
    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds {settings.MAX_UPLOAD_SIZE} bytes",
        )
    logger.info(f"Upload {file.filename!r} ({len(content)} bytes) for {tenant_key}")

    ingestor = BulkReplaceIngestor(store, journal=journal)
    result = ingestor.replace(tenant_key, decode_document(content))
    return BulkReplaceResponse(
        tenant_key=tenant_key,
        deleted_count=result.deleted_count,
        inserted_count=result.inserted_count,
        transactional=result.transactional,
    )


@router.get("/replace-status", response_model=Optional[PendingReplaceOut])
async def get_replace_status(
    tenant_key: str = Depends(resolve_target_tenant),
    journal: ReplaceJournal = Depends(get_journal),
):
    """Unfinished replace of the tenant, null when the last one completed"""
    return journal.pending(tenant_key)


@router.put("/profitability", response_model=ProfitabilityResponse)
async def set_profitability(
    update: ProfitabilityUpdate,
    tenant_key: str = Depends(resolve_target_tenant),
    store: RecordStore = Depends(get_store),
):
    """Store one profitability value on every record of the tenant"""
    updated = ProfitabilityAnnotator(store).set_profitability(tenant_key, update.value)
    return ProfitabilityResponse(
        tenant_key=tenant_key,
        profitability=parse_locale_number(update.value),
        updated_count=updated,
    )


@router.get("/{record_id}", response_model=InventoryRecordOut)
async def get_record(
    record_id: int,
    claims: Dict[str, Any] = Depends(get_current_claims),
    store: RecordStore = Depends(get_store),
):
    """Get one inventory record"""
    record = store.get_by_id(record_id)
    if record is None:
        raise RecordNotFoundError(record_id)
    return record


@router.post("", response_model=InventoryRecordOut, status_code=status.HTTP_201_CREATED)
async def create_record(
    record: InventoryRecordCreate,
    claims: Dict[str, Any] = Depends(get_current_claims),
    store: RecordStore = Depends(get_store),
):
    """Create one record; the viewer's tenant is used when none is given"""
    values = record.model_dump()
    if not values.get("tenant_key"):
        values["tenant_key"] = claims.get("tenant_key")
    return store.insert_one(values)


@router.put("/{record_id}", response_model=InventoryRecordOut)
async def update_record(
    record_id: int,
    record_update: InventoryRecordUpdate,
    claims: Dict[str, Any] = Depends(get_current_claims),
    store: RecordStore = Depends(get_store),
):
    """Update the fields sent for one record"""
    return store.update_one(record_id, record_update.model_dump(exclude_unset=True))


@router.delete("/{record_id}")
async def delete_record(
    record_id: int,
    claims: Dict[str, Any] = Depends(get_current_claims),
    store: RecordStore = Depends(get_store),
):
    """Delete one record"""
    store.delete_one(record_id)
    return {"message": f"Inventory record {record_id} deleted successfully"}

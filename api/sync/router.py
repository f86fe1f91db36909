"""
Catalog sync endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies
from core.db import RecordStore, get_store

from . import schemas, service

router = APIRouter(prefix="/api")


@router.post("/sync", response_model=schemas.SyncReport)
async def sync_catalog(
    payload: schemas.SyncRequest,
    store: RecordStore = Depends(get_store),
    _: object = Depends(auth_dependencies.require_admin),
) -> schemas.SyncReport:
    return await service.sync_products(store, payload.products)

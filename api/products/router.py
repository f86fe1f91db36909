"""
Product API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from auth import dependencies as auth_dependencies
from core.db import RecordStore, get_store

from . import schemas, service

router = APIRouter(prefix="/api/products")


@router.get("")
async def list_products(store: RecordStore = Depends(get_store)) -> list[dict]:
    return service.list_products(store)


@router.get("/slug/{slug}")
async def get_product_by_slug(slug: str, store: RecordStore = Depends(get_store)) -> dict:
    product = service.get_product_by_slug(store, slug)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.get("/{product_id}")
async def get_product(product_id: int, store: RecordStore = Depends(get_store)) -> dict:
    product = service.get_product(store, product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.post("")
async def create_product(
    payload: schemas.ProductCreate,
    store: RecordStore = Depends(get_store),
    _: object = Depends(auth_dependencies.get_current_user),
) -> dict:
    return service.create_product(store, payload)


@router.put("/{product_id}")
async def update_product(
    product_id: int,
    payload: schemas.ProductPatch,
    store: RecordStore = Depends(get_store),
    _: object = Depends(auth_dependencies.get_current_user),
) -> dict:
    product = service.update_product(store, product_id, payload)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    store: RecordStore = Depends(get_store),
    _: object = Depends(auth_dependencies.get_current_user),
) -> dict:
    removed = service.delete_product(store, product_id)
    return {"success": True, "deleted": removed}

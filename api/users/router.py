"""
User-record API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from auth import dependencies as auth_dependencies
from core.db import USERS, RecordStore, get_store

from . import schemas

router = APIRouter(prefix="/api/users")


@router.get("")
async def list_users(store: RecordStore = Depends(get_store)) -> list[dict]:
    return store.list_records(USERS)


@router.get("/{user_id}")
async def get_user(user_id: int, store: RecordStore = Depends(get_store)) -> dict:
    user = store.get_by_id(USERS, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.post("")
async def create_user(
    payload: schemas.UserCreate,
    store: RecordStore = Depends(get_store),
    _: object = Depends(auth_dependencies.require_admin),
) -> dict:
    return store.create(USERS, payload.model_dump())


@router.put("/{user_id}")
async def update_user(
    user_id: int,
    payload: schemas.UserPatch,
    store: RecordStore = Depends(get_store),
    _: object = Depends(auth_dependencies.require_admin),
) -> dict:
    # `image` may be cleared with an explicit null; name/email may not.
    patch = {
        k: v
        for k, v in payload.model_dump(exclude_unset=True).items()
        if v is not None or k == "image"
    }
    user = store.update(USERS, user_id, patch)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    store: RecordStore = Depends(get_store),
    _: object = Depends(auth_dependencies.require_admin),
) -> dict:
    removed = store.delete(USERS, user_id)
    return {"success": True, "deleted": removed}

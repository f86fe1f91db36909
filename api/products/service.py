"""
Product business logic and the product+owner join view.

Reads attach a `user` object to each product:
- resolved:   the owning user record exists -> its name and image
- unresolved: `userId` is set but no user record has that id
- unowned:    `userId` is null/absent

`name` defaults to "" and `image` to null when there is no resolved owner,
which keeps the shape the storefront already renders.
"""

from __future__ import annotations

import logging
from typing import Any

from assets import service as assets_service
from core.db import PRODUCTS, USERS, RecordStore

from . import schemas

logger = logging.getLogger(__name__)

NULLABLE_PATCH_FIELDS = {"format", "storage", "mobileImage", "desktopImage"}


def owner_index(users: list[dict[str, Any]]) -> dict[int, dict[str, Any]]:
    index: dict[int, dict[str, Any]] = {}
    for user in users:
        try:
            index.setdefault(int(user.get("id")), user)
        except (TypeError, ValueError):
            continue
    return index


def resolve_owner(product: dict[str, Any], index: dict[int, dict[str, Any]]) -> schemas.OwnerRef:
    raw_user_id = product.get("userId")
    if raw_user_id is None:
        return schemas.OwnerRef(status="unowned")

    try:
        user = index.get(int(raw_user_id))
    except (TypeError, ValueError):
        user = None
    if user is None:
        return schemas.OwnerRef(status="unresolved")

    return schemas.OwnerRef(
        status="resolved",
        name=str(user.get("name") or ""),
        image=user.get("image"),
    )


def with_owner(product: dict[str, Any], index: dict[int, dict[str, Any]]) -> dict[str, Any]:
    return {**product, "user": resolve_owner(product, index).model_dump()}


def list_products(store: RecordStore) -> list[dict[str, Any]]:
    index = owner_index(store.list_records(USERS))
    return [with_owner(p, index) for p in store.list_records(PRODUCTS)]


def get_product(store: RecordStore, product_id: int) -> dict[str, Any] | None:
    product = store.get_by_id(PRODUCTS, product_id)
    if product is None:
        return None
    return with_owner(product, owner_index(store.list_records(USERS)))


def get_product_by_slug(store: RecordStore, slug: str) -> dict[str, Any] | None:
    product = store.get_by_slug(slug)
    if product is None:
        return None
    return with_owner(product, owner_index(store.list_records(USERS)))


def create_product(store: RecordStore, payload: schemas.ProductCreate) -> dict[str, Any]:
    data = payload.model_dump()
    for optional in ("mobileImage", "desktopImage"):
        if data.get(optional) is None:
            data.pop(optional, None)
    return store.create(PRODUCTS, data)


def patch_fields(payload: schemas.ProductPatch) -> dict[str, Any]:
    fields = payload.model_dump(exclude_unset=True)
    return {k: v for k, v in fields.items() if v is not None or k in NULLABLE_PATCH_FIELDS}


def update_product(
    store: RecordStore,
    product_id: int,
    payload: schemas.ProductPatch,
) -> dict[str, Any] | None:
    patch = patch_fields(payload)
    before = store.get_by_id(PRODUCTS, product_id)
    if before is None:
        return None

    updated = store.update(PRODUCTS, product_id, patch)
    if updated is None:
        return None

    for field in ("image", "mobileImage", "desktopImage"):
        old, new = before.get(field), updated.get(field)
        # Compare the files, not the strings: "/products/./a.webp" is "/products/a.webp".
        if old and assets_service.local_image_path(old) != assets_service.local_image_path(new):
            assets_service.discard_local_image(old)
    return updated


def delete_product(store: RecordStore, product_id: int) -> bool:
    existing = store.get_by_id(PRODUCTS, product_id)
    removed = store.delete(PRODUCTS, product_id)
    if existing is not None:
        for field in ("image", "mobileImage", "desktopImage"):
            assets_service.discard_local_image(existing.get(field))
    return removed

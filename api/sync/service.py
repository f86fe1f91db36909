"""
Catalog sync orchestration.

Flow:
1) Merge the incoming product list into products.json (incoming wins on id)
2) Add placeholder user records for owners the store does not know yet
3) Download remotely hosted product images that are not stored locally yet

Step 3 is best-effort. Every image is fetched independently with its own
deadline; a failed or slow download is logged and reported, and never undoes
steps 1-2 or holds up the other downloads.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import httpx

from core import config, downloads
from core.db import PRODUCTS, USERS, RecordStore, utc_timestamp

from . import merger, schemas

logger = logging.getLogger(__name__)

PLACEHOLDER_USER_NAME = "Demo User"


def local_image_name(product_id: int, url: str) -> str:
    return f"product-{product_id}{downloads.url_extension(url)}"


def add_owner_placeholders(store: RecordStore, incoming: list[dict[str, Any]]) -> list[int]:
    """
    Make sure every `userId` referenced by the incoming products has a user
    record, so the join view can resolve it. Returns the ids that were added.
    """
    users = store.load(USERS)
    known: set[int] = set()
    for user in users:
        try:
            known.add(int(user.get("id")))
        except (TypeError, ValueError):
            continue

    added: list[int] = []
    for product in incoming:
        user_id = product.get("userId")
        if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id in known:
            continue
        users.append(
            {
                "id": user_id,
                "name": PLACEHOLDER_USER_NAME,
                "email": "",
                "image": None,
                "createdAt": utc_timestamp(),
            }
        )
        known.add(user_id)
        added.append(user_id)

    if added:
        store.replace_all(USERS, users)
        logger.info("sync_placeholder_users_added ids=%s", added)
    return added


def remote_images(incoming: list[dict[str, Any]]) -> dict[int, str]:
    """
    {product id: image URL} for incoming products with an http(s) image.
    A later record with the same id wins, like in the merge.
    """
    targets: dict[int, str] = {}
    for product in incoming:
        image = product.get("image")
        if isinstance(image, str) and downloads.is_remote_url(image):
            targets[int(product["id"])] = image.strip()
    return targets


async def _download_one(
    client: httpx.AsyncClient,
    *,
    product_id: int,
    url: str,
    dest_dir: Path,
    max_bytes: int,
    deadline_s: float,
) -> schemas.DownloadOutcome:
    target = dest_dir / local_image_name(product_id, url)
    if target.exists():
        return schemas.DownloadOutcome(id=product_id, url=url, status="skipped", path=str(target))

    try:
        data = await asyncio.wait_for(
            downloads.fetch_bytes(client, url, max_bytes=max_bytes),
            timeout=deadline_s,
        )
        target.write_bytes(data)
    except asyncio.TimeoutError:
        logger.warning("sync_download_failed product_id=%s url=%s error=deadline", product_id, url)
        return schemas.DownloadOutcome(
            id=product_id,
            url=url,
            status="failed",
            error=f"Download exceeded {deadline_s}s.",
        )
    except (downloads.DownloadError, OSError) as exc:
        logger.warning("sync_download_failed product_id=%s url=%s error=%s", product_id, url, exc)
        return schemas.DownloadOutcome(id=product_id, url=url, status="failed", error=str(exc))

    logger.info("sync_download_complete product_id=%s path=%s bytes=%s", product_id, target, len(data))
    return schemas.DownloadOutcome(id=product_id, url=url, status="downloaded", path=str(target))


async def download_product_images(
    incoming: list[dict[str, Any]],
    *,
    dest_dir: Path,
    client: httpx.AsyncClient | None = None,
    timeout_s: float | None = None,
    max_bytes: int | None = None,
) -> list[schemas.DownloadOutcome]:
    targets = remote_images(incoming)
    if not targets:
        return []

    timeout_s = timeout_s or config.download_timeout_s()
    max_bytes = max_bytes or config.download_max_bytes()
    dest_dir.mkdir(parents=True, exist_ok=True)

    async def run(active: httpx.AsyncClient) -> list[schemas.DownloadOutcome]:
        return list(
            await asyncio.gather(
                *(
                    _download_one(
                        active,
                        product_id=product_id,
                        url=url,
                        dest_dir=dest_dir,
                        max_bytes=max_bytes,
                        deadline_s=timeout_s,
                    )
                    for product_id, url in targets.items()
                )
            )
        )

    if client is not None:
        return await run(client)
    async with httpx.AsyncClient(timeout=timeout_s) as owned:
        return await run(owned)


async def sync_products(
    store: RecordStore,
    incoming: list[dict[str, Any]],
    *,
    client: httpx.AsyncClient | None = None,
) -> schemas.SyncReport:
    merged = merger.merge_products(store.load(PRODUCTS), incoming)
    store.replace_all(PRODUCTS, merged)
    logger.info("sync_merged incoming=%s total=%s", len(incoming), len(merged))

    users_added = add_owner_placeholders(store, incoming)
    outcomes = await download_product_images(
        incoming,
        dest_dir=config.product_images_dir(),
        client=client,
    )

    failed = sum(1 for o in outcomes if o.status == "failed")
    if failed:
        logger.warning("sync_downloads_incomplete failed=%s total=%s", failed, len(outcomes))

    return schemas.SyncReport(
        synced=len(incoming),
        total=len(merged),
        users_added=users_added,
        downloads=outcomes,
    )

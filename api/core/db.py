"""
JSON-file record store.

Two whole-document collections live in the data directory:
- products.json -> {"products": [...]}
- users.json    -> {"users": [...]}

FastAPI creates one `RecordStore` on startup (see `api/main.py`) and hands it
to routes through `get_store`. The store keeps no cache: every call reads the
document from disk, and every write rewrites the whole file.

There is no locking and no write-to-temp-then-rename. Two requests that
read the same document and then both write it race; the last write wins and
the other update is lost.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from fastapi import Request

from .errors import RecordValidationError, StorageError
from .slugs import slugify

PRODUCTS = "products"
USERS = "users"
KINDS = (PRODUCTS, USERS)

# Never overwritten by `update`.
PROTECTED_FIELDS = ("id", "createdAt", "userId")

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _record_id(record: dict[str, Any]) -> int | None:
    raw = record.get("id")
    # bool is an int subclass; `true` is not an id. Neither is 2.7.
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    return None


def next_id(records: list[dict[str, Any]]) -> int:
    ids = [rid for rid in (_record_id(r) for r in records) if rid is not None]
    return max(ids, default=0) + 1


class RecordStore:
    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir)

    def path_for(self, kind: str) -> Path:
        if kind not in KINDS:
            raise RecordValidationError(f"Unknown record kind '{kind}'.")
        return self.data_dir / f"{kind}.json"

    def ensure_layout(self) -> None:
        """
        Create the data directory and empty documents that do not exist yet.
        """
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            for kind in KINDS:
                path = self.path_for(kind)
                if not path.exists():
                    self.save(kind, [])
                    logger.info("store_document_created path=%s", path)
        except OSError as exc:
            raise StorageError(f"Could not prepare data directory {self.data_dir}.") from exc

    # -- raw document access -------------------------------------------------

    def load(self, kind: str) -> list[dict[str, Any]]:
        """
        Strict read. A missing file is an empty collection; anything else
        that goes wrong is a StorageError.
        """
        path = self.path_for(kind)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise StorageError(f"Could not read {path.name}.") from exc

        try:
            document = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StorageError(f"{path.name} is not valid JSON.") from exc

        records = document.get(kind) if isinstance(document, dict) else None
        if not isinstance(records, list):
            raise StorageError(f"{path.name} has no '{kind}' list.")
        return [r for r in records if isinstance(r, dict)]

    def save(self, kind: str, records: list[dict[str, Any]]) -> None:
        path = self.path_for(kind)
        body = json.dumps({kind: records}, indent=2, ensure_ascii=False)
        try:
            path.write_text(body, encoding="utf-8")
        except OSError as exc:
            logger.error("store_write_failed path=%s error=%s", path, exc)
            raise StorageError(f"Failed to write {path.name}.") from exc

    # -- queries -------------------------------------------------------------

    def list_records(self, kind: str) -> list[dict[str, Any]]:
        """
        Tolerant read for list endpoints: a missing or corrupt document
        yields an empty list.
        """
        try:
            return self.load(kind)
        except StorageError as exc:
            logger.warning("store_read_failed kind=%s error=%s", kind, exc)
            return []

    def get_by_id(self, kind: str, record_id: int) -> dict[str, Any] | None:
        for record in self.load(kind):
            if _record_id(record) == record_id:
                return record
        return None

    def get_by_slug(self, slug: str) -> dict[str, Any] | None:
        slug = (slug or "").strip()
        if not slug:
            raise RecordValidationError("slug is required.")
        for record in self.load(PRODUCTS):
            if record.get("slug") == slug:
                return record
        return None

    # -- writes --------------------------------------------------------------

    def create(self, kind: str, data: dict[str, Any]) -> dict[str, Any]:
        records = self.load(kind)

        record = dict(data)
        record["id"] = next_id(records)
        record["createdAt"] = utc_timestamp()
        if kind == PRODUCTS:
            record["slug"] = slugify(str(record.get("name") or ""))
        else:
            record.setdefault("image", None)

        records.append(record)
        self.save(kind, records)
        logger.info("record_created kind=%s id=%s", kind, record["id"])
        return record

    def update(self, kind: str, record_id: int, patch: dict[str, Any]) -> dict[str, Any] | None:
        records = self.load(kind)
        for index, existing in enumerate(records):
            if _record_id(existing) != record_id:
                continue

            merged = {**existing, **patch}
            for field in PROTECTED_FIELDS:
                if field in existing:
                    merged[field] = existing[field]
                else:
                    merged.pop(field, None)
            # A rename keeps the slug it was created with.
            if kind == PRODUCTS and "slug" in existing:
                merged["slug"] = existing["slug"]

            records[index] = merged
            self.save(kind, records)
            logger.info("record_updated kind=%s id=%s", kind, record_id)
            return merged
        return None

    def delete(self, kind: str, record_id: int) -> bool:
        records = self.load(kind)
        remaining = [r for r in records if _record_id(r) != record_id]
        self.save(kind, remaining)
        removed = len(remaining) != len(records)
        if removed:
            logger.info("record_deleted kind=%s id=%s", kind, record_id)
        return removed

    def replace_all(self, kind: str, records: list[dict[str, Any]]) -> None:
        self.save(kind, records)


def get_store(request: Request) -> RecordStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("Record store is not initialized. It is created on startup.")
    return store

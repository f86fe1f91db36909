"""
File storage on local disk.

This file contains logic that is independent of FastAPI's routing layer:
- Resolve a requested relative path inside a storage root (no traversal)
- Guess a content type from the file extension
- Validate and store uploaded product images
- Map a product `image` value back to a local file for cleanup
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from fastapi import HTTPException, UploadFile

from core import config
from core.slugs import slugify

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {".webp", ".png", ".jpg", ".jpeg", ".gif"}

CONTENT_TYPES = {
    ".webp": "image/webp",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".pdf": "application/pdf",
    ".zip": "application/zip",
    ".doc": "application/msword",
    ".docx": "application/msword",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.ms-excel",
    ".mp4": "video/mp4",
    ".mp3": "audio/mpeg",
}

# Public URL prefixes for locally stored images, and where they live on disk.
PRODUCT_IMAGE_PREFIX = "/products/"
UPLOAD_PREFIX = "/api/uploads/"


@dataclass(frozen=True)
class StoredUpload:
    filename: str
    path: str
    size_bytes: int


def content_type_for(filename: str) -> str:
    return CONTENT_TYPES.get(Path(filename).suffix.lower(), "application/octet-stream")


def resolve_safe_path(root: Path, relative_path: str) -> Path | None:
    """
    Return the file `relative_path` points to inside `root`, or None.

    The candidate is canonicalized (symlinks and `..` resolved) and must stay
    under the canonical root. Missing files and escaping paths both give None
    so callers answer 404 either way.
    """
    relative_path = (relative_path or "").strip()
    if not relative_path or "\x00" in relative_path:
        return None

    base = root.resolve()
    candidate = (base / relative_path.lstrip("/")).resolve()
    if not candidate.is_relative_to(base) or candidate == base:
        logger.warning("asset_path_rejected root=%s requested=%r", root, relative_path)
        return None
    if not candidate.is_file():
        return None
    return candidate


def local_image_path(image: str | None) -> Path | None:
    """
    Map a stored product `image` value to the file behind it.

    Only images this service stored itself are mapped; remote URLs and
    anything outside the storage roots give None.
    """
    image = (image or "").strip()
    if image.startswith(PRODUCT_IMAGE_PREFIX):
        return resolve_safe_path(config.product_images_dir(), image[len(PRODUCT_IMAGE_PREFIX):])
    if image.startswith(UPLOAD_PREFIX):
        return resolve_safe_path(config.uploads_dir(), image[len(UPLOAD_PREFIX):])
    return None


def discard_local_image(image: str | None) -> bool:
    """
    Best-effort removal of a replaced or orphaned product image.
    """
    path = local_image_path(image)
    if path is None:
        return False
    try:
        path.unlink()
    except OSError as exc:
        logger.warning("image_delete_failed path=%s error=%s", path, exc)
        return False
    logger.info("image_deleted path=%s", path)
    return True


def validate_upload(file: UploadFile) -> str:
    """
    Return the normalized file extension if this upload is acceptable.

    We validate based on filename extension here because `content_type`
    is often missing or incorrect in practice.
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    ext = Path(file.filename).suffix.lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{ext}'. Allowed: {sorted(ALLOWED_IMAGE_EXTENSIONS)}",
        )
    return ext


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    """
    Read the upload into memory, enforcing a maximum size.
    """
    chunk_size = 1024 * 1024  # 1 MiB
    buf = bytearray()

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"File too large. Max is {max_bytes} bytes.",
            )

    if not buf:
        raise HTTPException(status_code=400, detail="Uploaded file is empty.")
    return bytes(buf)


def upload_filename(product_name: str, ext: str) -> str:
    base = slugify(product_name) or "product"
    return f"{base}-{int(time.time() * 1000)}{ext}"


def store_image(data: bytes, *, product_name: str, ext: str) -> StoredUpload:
    """
    Write image bytes under the public products directory.

    Bytes are stored as received; format conversion and resizing are left
    to whoever prepares the image.
    """
    target_dir = config.product_images_dir()
    filename = upload_filename(product_name, ext)
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        (target_dir / filename).write_bytes(data)
    except OSError as exc:
        logger.exception("upload_write_failed filename=%s", filename)
        raise HTTPException(status_code=500, detail="Error uploading file") from exc

    logger.info("upload_stored filename=%s size_bytes=%s", filename, len(data))
    return StoredUpload(
        filename=filename,
        path=f"{PRODUCT_IMAGE_PREFIX}{filename}",
        size_bytes=len(data),
    )


async def ingest_upload(file: UploadFile, *, product_name: str) -> StoredUpload:
    """
    High-level upload step for a single image.

    This is what the FastAPI router should call.
    """
    ext = validate_upload(file)
    data = await read_upload_bytes(file, max_bytes=config.max_upload_bytes())
    return store_image(data, product_name=product_name, ext=ext)

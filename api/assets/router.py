"""
FastAPI router for stored files: serving and image upload.
"""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import FileResponse

from auth import dependencies as auth_dependencies
from core import config

from . import service

router = APIRouter()

IMMUTABLE_CACHE = "public, max-age=31536000, immutable"


def _serve(
    root: Path,
    relative_path: str,
    *,
    headers: dict[str, str],
    attachment: bool = False,
) -> FileResponse:
    path = service.resolve_safe_path(root, relative_path)
    if path is None:
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(
        path,
        media_type=service.content_type_for(path.name),
        headers=headers,
        # Starlette quotes the name and adds filename* for non-ASCII names.
        filename=path.name if attachment else None,
    )


@router.get("/products/{file_path:path}")
async def product_image(file_path: str) -> FileResponse:
    return _serve(config.product_images_dir(), file_path, headers={"Cache-Control": IMMUTABLE_CACHE})


@router.get("/api/uploads/{file_path:path}")
@router.get("/api/images/{file_path:path}")
async def uploaded_file(file_path: str) -> FileResponse:
    return _serve(config.uploads_dir(), file_path, headers={"Cache-Control": IMMUTABLE_CACHE})


@router.get("/api/assets/{file_path:path}")
async def asset_download(file_path: str) -> FileResponse:
    """
    Downloadable product assets (zips, pdfs, ...), sent as attachments.
    """
    return _serve(
        config.assets_dir(),
        file_path,
        headers={"Cache-Control": "no-cache"},
        attachment=True,
    )


@router.post("/api/upload")
async def upload_image(
    file: UploadFile = File(...),
    product_name: str = Form(default="", alias="productName"),
    _: object = Depends(auth_dependencies.get_current_user),
) -> dict:
    stored = await service.ingest_upload(file, product_name=product_name)
    return {
        "success": True,
        "path": stored.path,
        "filename": stored.filename,
        "size_bytes": stored.size_bytes,
    }

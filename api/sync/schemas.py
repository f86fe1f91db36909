"""
Pydantic schemas for the catalog sync endpoint.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class SyncRequest(BaseModel):
    # Records are kept as sent; the merger only requires an integer id.
    products: list[dict[str, Any]] = Field(default_factory=list)


class DownloadOutcome(BaseModel):
    id: int
    url: str
    status: Literal["downloaded", "skipped", "failed"]
    path: str | None = None
    error: str | None = None


class SyncReport(BaseModel):
    success: bool = True
    synced: int
    total: int
    users_added: list[int] = Field(default_factory=list)
    downloads: list[DownloadOutcome] = Field(default_factory=list)

"""
Pydantic schemas for product endpoints.

Wire and disk field names are camelCase (`userId`, `mobileImage`, ...).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProductCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    price: float = Field(..., ge=0)
    category: str = ""
    tags: list[str] = Field(default_factory=list)
    highlights: list[str] = Field(default_factory=list)
    format: str | None = None
    storage: str | None = None
    image: str = ""
    mobileImage: str | None = None
    desktopImage: str | None = None
    userId: int | None = None


class ProductPatch(BaseModel):
    """
    Fields an update may change. `id`, `createdAt`, `userId` and `slug` are
    not listed, so sending them is rejected.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    category: str | None = None
    tags: list[str] | None = None
    highlights: list[str] | None = None
    format: str | None = None
    storage: str | None = None
    image: str | None = None
    mobileImage: str | None = None
    desktopImage: str | None = None


class OwnerRef(BaseModel):
    status: str
    name: str = ""
    image: str | None = None

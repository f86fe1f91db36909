"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=128)


class SessionUser(BaseModel):
    id: int
    email: str
    role: str
    name: str | None = None


class LoginResponse(BaseModel):
    success: bool = True
    user: SessionUser
    redirectTo: str

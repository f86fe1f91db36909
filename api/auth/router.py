"""
Session endpoints: login sets the cookie, logout clears it.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from core import config

from . import dependencies, schemas, security, service

router = APIRouter(prefix="/api/auth")


@router.post("/login", response_model=schemas.LoginResponse)
async def login(payload: schemas.LoginRequest, response: Response) -> schemas.LoginResponse:
    body, token = service.login(payload)
    response.set_cookie(
        key=security.COOKIE_NAME,
        value=token,
        max_age=security.access_token_expire_minutes() * 60,
        path="/",
        httponly=True,
        secure=config.is_production(),
        samesite="lax",
    )
    return body


@router.post("/logout")
async def logout(response: Response) -> dict:
    response.delete_cookie(key=security.COOKIE_NAME, path="/")
    return {"success": True}


@router.get("/check")
async def check(
    current_user: schemas.SessionUser = Depends(dependencies.get_current_user),
) -> dict:
    return {"user": current_user.model_dump()}


@router.get("/verify")
async def verify(access_token: str = Depends(dependencies.get_session_token)) -> dict:
    return {"user": service.decode_session(access_token)}

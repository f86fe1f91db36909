"""
Auth dependencies for protected FastAPI routes.

The session token normally arrives in the `auth_token` cookie; an
`Authorization: Bearer <token>` header is accepted for scripted clients.
"""

from __future__ import annotations

from fastapi import Cookie, Depends, Header, HTTPException, status

from . import schemas, security, service


def _extract_bearer_token(authorization: str | None) -> str | None:
    raw = (authorization or "").strip()
    if not raw:
        return None

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Authorization header format.",
        )

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization must be: Bearer <token>.",
        )
    return token


async def get_session_token(
    auth_token: str | None = Cookie(default=None, alias=security.COOKIE_NAME),
    authorization: str | None = Header(default=None),
) -> str:
    token = (auth_token or "").strip() or _extract_bearer_token(authorization)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return token


async def get_current_user(access_token: str = Depends(get_session_token)) -> schemas.SessionUser:
    return service.get_user_from_access_token(access_token)


async def require_admin(
    current_user: schemas.SessionUser = Depends(get_current_user),
) -> schemas.SessionUser:
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role required.",
        )
    return current_user

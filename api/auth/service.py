"""
Auth business logic.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from . import credentials, schemas, security

logger = logging.getLogger(__name__)


def _redirect_for(role: str) -> str:
    return "/dashboard" if role == "admin" else "/"


def login(payload: schemas.LoginRequest) -> tuple[schemas.LoginResponse, str]:
    """
    Check the credential list and return (response body, signed token).

    The router puts the token in the session cookie.
    """
    entry = credentials.find_by_email(payload.email)
    if entry is None:
        logger.info("login_rejected reason=unknown_email")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    if not security.verify_password(payload.password, str(entry.get("password") or "")):
        logger.info("login_rejected reason=bad_password credential_id=%s", entry["id"])
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    role = str(entry["role"])
    token = security.build_access_token(
        user_id=int(entry["id"]),
        email=str(entry["email"]),
        role=role,
    )
    logger.info("login_succeeded credential_id=%s role=%s", entry["id"], role)

    user = schemas.SessionUser(
        id=int(entry["id"]),
        email=str(entry["email"]),
        role=role,
        name=entry.get("name"),
    )
    return schemas.LoginResponse(user=user, redirectTo=_redirect_for(role)), token


def decode_session(access_token: str) -> dict:
    try:
        return security.decode_access_token(access_token)
    except security.AuthSecurityError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc


def get_user_from_access_token(access_token: str) -> schemas.SessionUser:
    payload = decode_session(access_token)

    subject = str(payload.get("sub") or "").strip()
    if not subject.isdigit():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid access token subject.",
        )

    email = str(payload.get("email") or "")
    entry = credentials.find_by_email(email)
    if entry is None or int(entry["id"]) != int(subject):
        # Credential removed or replaced since the token was issued.
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Credential not found.",
        )

    return schemas.SessionUser(
        id=int(subject),
        email=email,
        role=str(entry["role"]),
        name=entry.get("name"),
    )

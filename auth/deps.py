from __future__ import annotations

import secrets

from fastapi import HTTPException, Request, status

from auth.config import settings


def _extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None

    return token.strip()


def extract_token_from_request(request: Request) -> str | None:
    return _extract_bearer_token(request.headers.get("authorization"))


def require_api_token(request: Request) -> None:
    """Static shared token guarding machine-to-machine API calls."""
    token = extract_token_from_request(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not secrets.compare_digest(token.encode(), settings.api_access_token.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )

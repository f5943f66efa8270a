"""Shared FastAPI dependencies for caller identity."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from app.core.config import Settings, get_settings

logger = logging.getLogger("auth.deps")
security = HTTPBearer(auto_error=False)

JWT_ALGORITHMS = ["HS256"]


class CurrentUser(BaseModel):
    """Minimal identity taken from a token issued by the surrounding app."""
    id: str
    email: Optional[str] = None


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
) -> Optional[CurrentUser]:
    """Resolve the caller when a bearer token is present.

    No token (or no ``JWT_SECRET`` configured) means an anonymous caller. A
    token that is present but fails verification is rejected with 401.
    """
    if credentials is None or not settings.jwt_secret:
        return None
    try:
        claims = jwt.decode(credentials.credentials, settings.jwt_secret, algorithms=JWT_ALGORITHMS)
    except JWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token") from exc

    user_id = claims.get("userId") or claims.get("sub")
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token: missing subject")

    current = CurrentUser(id=str(user_id), email=claims.get("email"))
    request_id = getattr(request.state, "request_id", None)
    logger.info("auth_resolved user_id=%s request_id=%s path=%s", current.id, request_id, request.url.path)
    return current

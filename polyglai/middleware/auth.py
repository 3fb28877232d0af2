"""Auth dependencies: Supabase Auth bearer token → user.

Consumer routes accept anonymous callers (nothing gets recorded for them);
admin routes require ``app_metadata.role == "admin"``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from fastapi import Depends, Header, HTTPException, status

from polyglai.db.supabase_client import get_client

logger = logging.getLogger(__name__)


@dataclass
class AuthUser:
    id: str
    email: str | None = None
    app_metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_admin(self) -> bool:
        return self.app_metadata.get("role") == "admin"


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


async def resolve_user(token: str) -> AuthUser | None:
    """Validates the JWT with Supabase Auth. Returns None if it is rejected."""
    try:
        client = await get_client()
        response = await client.auth.get_user(token)
    except Exception:
        # 인증 실패는 익명 요청으로 처리 (번역 흐름을 막지 않는다)
        logger.warning("Bearer token could not be verified, continuing anonymously", exc_info=True)
        return None

    user = getattr(response, "user", None)
    if user is None:
        return None
    return AuthUser(
        id=user.id,
        email=getattr(user, "email", None),
        app_metadata=dict(getattr(user, "app_metadata", None) or {}),
    )


async def get_optional_user(authorization: str | None = Header(None)) -> AuthUser | None:
    token = _bearer_token(authorization)
    if token is None:
        return None
    return await resolve_user(token)


async def get_optional_user_id(user: AuthUser | None = Depends(get_optional_user)) -> str | None:
    return user.id if user else None


async def get_current_user(user: AuthUser | None = Depends(get_optional_user)) -> AuthUser:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def require_admin(user: AuthUser = Depends(get_current_user)) -> AuthUser:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user

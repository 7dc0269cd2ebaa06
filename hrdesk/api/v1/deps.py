"""
Shared FastAPI dependencies.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable, Coroutine
from typing import Any, Optional

import httpx
from fastapi import Cookie, Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hrdesk.core.config import settings
from hrdesk.core.exceptions import AuthenticationError, PermissionDeniedError
from hrdesk.core.security import decode_access_token
from hrdesk.db.session import async_session_factory
from hrdesk.models.user import User

# auto_error=False so we can fall back to the cookie when the header is missing
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_PREFIX}/auth/login", auto_error=False
)


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Public holiday source ───────────────────────────────────────────
async def get_holiday_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(
        base_url=settings.PUBLIC_HOLIDAY_API_URL,
        timeout=settings.PUBLIC_HOLIDAY_API_TIMEOUT,
    ) as client:
        yield client


# ── Auth dependencies ───────────────────────────────────────────────
async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    access_token: Optional[str] = Cookie(default=None),  # Read from HttpOnly Cookie
    db: AsyncSession = Depends(get_db),
) -> User:
    """Decode JWT from Header OR Cookie, look up user."""

    # Priority: Header > Cookie
    final_token = token
    if not final_token and access_token:
        # login sets the cookie as "Bearer <token>"
        if access_token.startswith("Bearer "):
            final_token = access_token.split(" ", 1)[1]
        else:
            final_token = access_token

    if not final_token:
        raise AuthenticationError("Authentication required")

    payload = decode_access_token(final_token)
    if payload is None:
        raise AuthenticationError("Invalid token")

    user_id: str | None = payload.get("sub")
    if user_id is None or not user_id.isdigit():
        raise AuthenticationError("Invalid token")

    result = await db.execute(select(User).where(User.id == int(user_id)))
    user = result.scalar_one_or_none()
    if user is None:
        raise AuthenticationError("Invalid token")
    return user


def require_roles(*roles: str) -> Callable[..., Coroutine[Any, Any, User]]:
    """Build a dependency that only lets the given roles through."""

    async def _guard(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise PermissionDeniedError("Insufficient permissions")
        return current_user

    return _guard


require_admin = require_roles("admin")
require_privileged = require_roles("admin", "manager")

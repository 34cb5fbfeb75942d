"""
FastAPI dependencies: database session, identity service and rate limiter.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Depends
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import PasswordHasher
from app.db.session import async_session_factory
from app.repositories.role import RoleRepository
from app.repositories.user import UserRepository
from app.services.identity import IdentityService

# Rate limiter, keyed by client IP
limiter = Limiter(key_func=get_remote_address)

_hasher = PasswordHasher()


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Identity service (one per request, bound to its session) ────────
def get_identity_service(db: AsyncSession = Depends(get_db)) -> IdentityService:
    return IdentityService(UserRepository(db), RoleRepository(db), _hasher)

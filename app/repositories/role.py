"""
Role store: lookup by name and insert-if-absent support.
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.role import Role
from app.repositories.base import commit_or_rollback


class RoleRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_name(self, name: str) -> Role | None:
        # Staged roles stay invisible until commit(). Both sides use the
        # database lower() so lookups agree with uq_roles_name_lower
        with self._session.no_autoflush:
            result = await self._session.execute(
                select(Role)
                .where(func.lower(Role.name) == func.lower(name.strip()))
                .execution_options(populate_existing=True)
            )
            return result.scalar_one_or_none()

    def add(self, role: Role) -> None:
        self._session.add(role)

    async def commit(self) -> None:
        await commit_or_rollback(self._session)

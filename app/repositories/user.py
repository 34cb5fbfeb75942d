"""
User store: every lookup returns the user with its roles loaded.

``add`` only stages; lookups do not autoflush, so a staged user becomes
visible after ``commit``.
"""

from __future__ import annotations

import uuid

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.repositories.base import commit_or_rollback


class UserRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def add(self, user: User) -> None:
        self._session.add(user)

    async def get_by_id(self, user_id: uuid.UUID) -> User | None:
        return await self._first(select(User).where(User.id == user_id))

    async def get_by_email(self, email: str) -> User | None:
        # Fold both sides in the database so lookups agree with uq_users_email_lower
        return await self._first(
            select(User).where(func.lower(User.email) == func.lower(email.strip()))
        )

    async def commit(self) -> None:
        await commit_or_rollback(self._session)

    async def _first(self, stmt: Select) -> User | None:
        # populate_existing refreshes instances expired by an earlier rollback
        with self._session.no_autoflush:
            result = await self._session.execute(
                stmt.execution_options(populate_existing=True)
            )
            return result.scalar_one_or_none()

"""
Shared plumbing for the session-bound repositories.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession


class DuplicateRecordError(Exception):
    """A commit violated a uniqueness constraint; the session was rolled back."""


async def commit_or_rollback(session: AsyncSession) -> None:
    """Commit staged changes, translating constraint violations."""
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise DuplicateRecordError(str(exc.orig)) from exc

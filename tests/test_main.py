"""Tests for application startup helpers."""

import pytest
from sqlalchemy import func, select

from app import main
from app.core.config import settings
from app.models.user import User


@pytest.mark.asyncio
async def test_seed_first_admin_is_idempotent(monkeypatch, session_factory, service_factory):
    """Seeding twice leaves one admin account holding the admin role."""
    monkeypatch.setattr(main, "async_session_factory", session_factory)
    monkeypatch.setattr(settings, "FIRST_ADMIN_PASSWORD", "s3cure-admin-pass")

    await main.seed_first_admin()
    await main.seed_first_admin()

    async with session_factory() as session:
        view = await service_factory(session).authenticate(
            settings.FIRST_ADMIN_EMAIL, "s3cure-admin-pass"
        )
    assert view is not None
    assert view.name == settings.FIRST_ADMIN_NAME
    assert view.roles == ["admin"]


@pytest.mark.asyncio
async def test_seed_first_admin_refuses_default_password(monkeypatch, session_factory):
    monkeypatch.setattr(main, "async_session_factory", session_factory)
    monkeypatch.setattr(settings, "FIRST_ADMIN_PASSWORD", main.DEFAULT_ADMIN_PASSWORD)

    await main.seed_first_admin()

    async with session_factory() as session:
        count = (await session.execute(select(func.count()).select_from(User))).scalar_one()
    assert count == 0

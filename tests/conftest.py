"""
Shared test fixtures for the user permission service test suite.

Async throughout (aiosqlite + AsyncSession).
"""

import os
import sys
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["LOGIN_RATE_LIMIT"] = "1000/minute"
os.environ["SEED_FIRST_ADMIN"] = "false"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.v1.deps import get_db, limiter
from app.core.security import PasswordHasher
from app.db.base import Base
from app.main import app
from app.repositories.role import RoleRepository
from app.repositories.user import UserRepository
from app.services.identity import IdentityService

# One shared in-memory database for the whole test session
test_engine = create_async_engine(
    "sqlite+aiosqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@pytest.fixture(autouse=True)
async def setup_db():
    """Create all tables before usage and drop after."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    limiter.reset()

    yield

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestingSessionLocal() as session:
        yield session


app.dependency_overrides[get_db] = _override_get_db


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def session_factory() -> async_sessionmaker[AsyncSession]:
    """Factory for tests that need more than one independent session."""
    return TestingSessionLocal


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with TestingSessionLocal() as session:
        yield session


def _make_service(session: AsyncSession) -> IdentityService:
    return IdentityService(UserRepository(session), RoleRepository(session), PasswordHasher())


@pytest.fixture
def service_factory():
    """Build an identity service bound to a given session."""
    return _make_service


@pytest.fixture
def identity_service(db_session: AsyncSession) -> IdentityService:
    """Identity service bound to the test session."""
    return _make_service(db_session)

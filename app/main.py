"""
User Permission Service: Application entry point.

This is the **only** file that assembles the app.  All business logic
lives in `services/`; `api/` is transport and `repositories/` is data access.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.api import api_router
from app.api.v1.deps import limiter
from app.core.config import DEFAULT_ADMIN_PASSWORD, settings
from app.core.exceptions import register_exception_handlers
from app.core.security import PasswordHasher
from app.db.base import Base
from app.db.session import async_session_factory, engine

# Ensure all models are imported so metadata.create_all can see them
from app.models.role import Role  # noqa: F401
from app.models.user import User, UserRole  # noqa: F401
from app.repositories.role import RoleRepository
from app.repositories.user import UserRepository
from app.services.identity import IdentityService
from app.services.results import Conflict, Failure

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


async def seed_first_admin() -> None:
    """Register the configured admin account and give it the admin role.

    Refuses to run while ``FIRST_ADMIN_PASSWORD`` is the published default.
    """
    if settings.FIRST_ADMIN_PASSWORD == DEFAULT_ADMIN_PASSWORD:
        logger.error(
            "Skipping first admin seed: FIRST_ADMIN_PASSWORD is still the default"
        )
        return

    async with async_session_factory() as session:
        users = UserRepository(session)
        service = IdentityService(users, RoleRepository(session), PasswordHasher())
        outcome = await service.register(
            settings.FIRST_ADMIN_NAME,
            settings.FIRST_ADMIN_EMAIL,
            settings.FIRST_ADMIN_PASSWORD,
        )
        if isinstance(outcome, Conflict):
            return
        if isinstance(outcome, Failure):
            raise RuntimeError(f"Cannot seed first admin: {outcome.message}")
        await service.assign_role(outcome.value.id, "admin")
        logger.info(
            "Default admin created: %s (password: <redacted>)",
            settings.FIRST_ADMIN_EMAIL,
        )


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    if settings.SEED_FIRST_ADMIN:
        await seed_first_admin()

    logger.info("%s v%s started", settings.PROJECT_NAME, settings.VERSION)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="User registration, authentication and role assignment",
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # slowapi looks the limiter up on app.state
    application.state.limiter = limiter

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    # Mount API v1
    application.include_router(api_router, prefix=settings.API_V1_PREFIX)

    return application


app = create_app()

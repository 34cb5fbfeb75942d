import asyncio
import os
import sys
import uuid

sys.path.append(os.getcwd())

from app.db.base import Base
from app.db.session import async_session_factory, engine
from app.models.user import User  # noqa: F401
from app.repositories.role import RoleRepository
from app.repositories.user import UserRepository
from app.core.security import PasswordHasher
from app.services.identity import IdentityService
from app.services.results import Conflict, Ok

# 💀 REGISTER RACE: MANY CALLERS, ONE EMAIL

async def register_once(email: str, n: int):
    async with async_session_factory() as session:
        service = IdentityService(UserRepository(session), RoleRepository(session), PasswordHasher())
        return await service.register(f"Racer {n}", email, "secret1")

async def assign_once(user_id: uuid.UUID, role: str):
    async with async_session_factory() as session:
        service = IdentityService(UserRepository(session), RoleRepository(session), PasswordHasher())
        return await service.assign_role(user_id, role)

async def race(concurrency=50):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    email = f"race-{uuid.uuid4().hex[:8]}@test.com"
    print(f"💀 LAUNCHING {concurrency} CONCURRENT REGISTRATIONS FOR {email}...")
    results = await asyncio.gather(*(register_once(email.upper() if n % 2 else email, n) for n in range(concurrency)))

    winners = [r for r in results if isinstance(r, Ok)]
    conflicts = [r for r in results if isinstance(r, Conflict)]
    print(f"   Results: ok={len(winners)} conflict={len(conflicts)} other={concurrency - len(winners) - len(conflicts)}")
    if len(winners) != 1:
        print("🚨 CRITICAL: uniqueness broken!")
        return

    role = f"role-{uuid.uuid4().hex[:6]}"
    user_id = winners[0].value.id
    print(f"💀 LAUNCHING {concurrency} CONCURRENT ASSIGNMENTS OF {role}...")
    await asyncio.gather(*(assign_once(user_id, role) for _ in range(concurrency)))

    async with async_session_factory() as session:
        user = await UserRepository(session).get_by_id(user_id)
        names = [link.role.name for link in user.user_roles]
    if names != [role]:
        print(f"🚨 CRITICAL: expected exactly one {role}, got {names}")
    else:
        print("✅ Constraints held")
    await engine.dispose()

if __name__ == "__main__":
    asyncio.run(race())

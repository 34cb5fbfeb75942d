"""
Identity service: registration, authentication and role assignment.

The only place holding business rules. It talks to the user and role
stores and the password hasher; it never touches HTTP. Expected
failures come back as ``InvalidInput`` / ``Conflict`` / ``NotFound``
values. Anything else (database down, bugs) propagates to the caller.
"""

from __future__ import annotations

import logging
import uuid

from app.core.security import PASSWORD_MIN_LENGTH, PasswordHasher
from app.models.role import Role
from app.models.user import User, UserRole
from app.repositories.base import DuplicateRecordError
from app.repositories.role import RoleRepository
from app.repositories.user import UserRepository
from app.schemas.user import UserView
from app.services.results import Conflict, InvalidInput, NotFound, Ok

logger = logging.getLogger(__name__)

_EMAIL_TAKEN = "User already exists with this email"


def to_view(user: User) -> UserView:
    """Project a user (with roles loaded) onto its public shape."""
    return UserView(
        id=user.id,
        name=user.name,
        email=user.email,
        roles=[link.role.name for link in user.user_roles],
    )


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


class IdentityService:
    def __init__(
        self,
        users: UserRepository,
        roles: RoleRepository,
        hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._roles = roles
        self._hasher = hasher

    async def register(
        self, name: str, email: str, password: str
    ) -> Ok[UserView] | InvalidInput | Conflict:
        if _blank(name):
            return InvalidInput(field="name", message="Name is required")
        if _blank(email):
            return InvalidInput(field="email", message="Email is required")
        if _blank(password) or len(password) < PASSWORD_MIN_LENGTH:
            return InvalidInput(
                field="password",
                message=f"Password must be at least {PASSWORD_MIN_LENGTH} characters",
            )

        name, email = name.strip(), email.strip()
        if await self._users.get_by_email(email) is not None:
            return Conflict(message=_EMAIL_TAKEN)

        user = User(
            id=uuid.uuid4(),
            name=name,
            email=email,
            password_hash=self._hasher.hash(password),
            user_roles=[],
        )
        self._users.add(user)
        try:
            await self._users.commit()
        except DuplicateRecordError:
            # Lost a race against a concurrent registration
            return Conflict(message=_EMAIL_TAKEN)

        logger.info("Registered user %s", user.id)
        return Ok(to_view(user))

    async def authenticate(self, email: str, password: str) -> UserView | None:
        """Return the user's view on valid credentials, else ``None``.

        Unknown email and wrong password are indistinguishable.
        """
        if _blank(email) or not password:
            return None
        user = await self._users.get_by_email(email)
        if user is None or not self._hasher.verify(user.password_hash, password):
            return None
        return to_view(user)

    async def assign_role(
        self, user_id: uuid.UUID, role_name: str
    ) -> Ok[None] | InvalidInput | NotFound:
        """Give *role_name* to the user, creating the role on first use.

        Assigning a role the user already holds is a no-op.
        """
        if _blank(role_name):
            return InvalidInput(field="roleName", message="Role name is required")
        role_name = role_name.strip()

        user = await self._users.get_by_id(user_id)
        if user is None:
            return NotFound(message="User not found")

        role = await self._roles.get_by_name(role_name)
        if role is None:
            role = await self._create_role(role_name)
            # A lost creation race rolls back and expires the user; reload it
            user = await self._users.get_by_id(user_id)
            if user is None:
                return NotFound(message="User not found")

        if any(link.role_id == role.id for link in user.user_roles):
            return Ok(None)

        user.user_roles.append(UserRole(user_id=user.id, role_id=role.id, role=role))
        try:
            await self._users.commit()
        except DuplicateRecordError:
            # A concurrent identical assignment already persisted the pair
            return Ok(None)

        logger.info("Assigned role %r to user %s", role.name, user_id)
        return Ok(None)

    async def get_by_id(self, user_id: uuid.UUID) -> UserView | None:
        user = await self._users.get_by_id(user_id)
        return to_view(user) if user is not None else None

    async def _create_role(self, role_name: str) -> Role:
        role = Role(id=uuid.uuid4(), name=role_name)
        self._roles.add(role)
        try:
            await self._roles.commit()
        except DuplicateRecordError:
            existing = await self._roles.get_by_name(role_name)
            if existing is None:
                raise
            return existing
        logger.info("Created role %r", role_name)
        return role

"""
User endpoints: registration, lookup and role assignment.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from app.api.v1.deps import get_identity_service
from app.core.exceptions import failure_to_http
from app.schemas.user import RoleAssign, UserCreate, UserView
from app.services.identity import IdentityService
from app.services.results import Failure

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserView, status_code=status.HTTP_201_CREATED)
async def register_user(
    body: UserCreate,
    request: Request,
    response: Response,
    service: IdentityService = Depends(get_identity_service),
) -> UserView:
    """Register a new user. The new user starts with no roles."""
    outcome = await service.register(body.name, body.email, body.password)
    if isinstance(outcome, Failure):
        raise failure_to_http(outcome)
    user = outcome.value
    response.headers["Location"] = str(request.url_for("get_user", user_id=str(user.id)))
    return user


@router.get("/{user_id}", response_model=UserView, name="get_user")
async def get_user(
    user_id: uuid.UUID,
    service: IdentityService = Depends(get_identity_service),
) -> UserView:
    user = await service.get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.post(
    "/{user_id}/roles",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def assign_role(
    user_id: uuid.UUID,
    body: RoleAssign,
    service: IdentityService = Depends(get_identity_service),
) -> Response:
    """Assign a role by name; unknown role names are created on the fly."""
    outcome = await service.assign_role(user_id, body.role_name)
    if isinstance(outcome, Failure):
        raise failure_to_http(outcome)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

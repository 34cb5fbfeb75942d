"""
Auth endpoints: credential check only; no token or session is issued.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.api.v1.deps import get_identity_service, limiter
from app.core.config import settings
from app.schemas.auth import LoginRequest
from app.schemas.user import UserView
from app.services.identity import IdentityService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=UserView)
@limiter.limit(lambda: settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    body: LoginRequest,
    service: IdentityService = Depends(get_identity_service),
) -> UserView:
    """Verify email/password and return the user with its roles."""
    user = await service.authenticate(body.email, body.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    return user

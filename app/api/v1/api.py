"""
V1 API router aggregator: wires all endpoint modules together.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import auth, users

api_router = APIRouter()

# Login (credential check)
api_router.include_router(auth.router)

# Registration, lookup, role assignment
api_router.include_router(users.router)

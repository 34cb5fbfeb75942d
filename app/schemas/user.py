"""Pydantic schemas for user registration, role assignment and the user view."""

from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Field is required")
    return v


class UserCreate(BaseModel):
    name: str = Field(..., max_length=200)
    email: str = Field(..., max_length=320)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("name", "email")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        return _required(v)


class RoleAssign(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    role_name: str = Field(..., alias="roleName", max_length=100)

    @field_validator("role_name")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        return _required(v)


class UserView(BaseModel):
    """Externally visible user: everything except the password digest."""

    id: uuid.UUID
    name: str
    email: str
    roles: list[str] = []

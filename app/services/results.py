"""
Outcome types returned by the identity service.

Expected failures are values, not exceptions: each service signature
lists exactly which of them it can return.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failure:
    message: str


@dataclass(frozen=True)
class InvalidInput(Failure):
    field: str = ""


@dataclass(frozen=True)
class Conflict(Failure):
    pass


@dataclass(frozen=True)
class NotFound(Failure):
    pass

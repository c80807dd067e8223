"""Domain models for the storefront management service."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class UserRole(str, Enum):
    """Fixed set of roles a user account can be tagged with."""

    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    USER = "USER"


def parse_role(value: Optional[str]) -> Optional[UserRole]:
    """Parse ``value`` case-insensitively, returning ``None`` when it is not a known role."""

    if value is None:
        return None
    normalized = value.strip().upper()
    if not normalized:
        return None
    try:
        return UserRole[normalized]
    except KeyError:
        return None


@dataclass(frozen=True)
class User:
    """A user account keyed by email. ``password`` always holds the encrypted value."""

    email: str
    password: str
    name: Optional[str] = None
    role: UserRole = UserRole.USER


@dataclass(frozen=True)
class Store:
    """A physical store keyed by a caller-supplied identifier."""

    id: str
    address: Optional[str] = None
    description: Optional[str] = None


__all__ = ["Store", "User", "UserRole", "parse_role"]

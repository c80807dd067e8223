"""Wire representations of domain entities and the mappers between them."""
from __future__ import annotations

import time
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field

from .models import Store, User, UserRole


class StoreDTO(BaseModel):
    id: str
    address: Optional[str] = None
    description: Optional[str] = None


class UserDTO(BaseModel):
    """Public view of a user account. It has no password field."""

    email: str
    name: Optional[str] = None
    role: Optional[str] = None


def _now_millis() -> int:
    return int(time.time() * 1000)


class ErrorResponse(BaseModel):
    status: int
    message: str
    timestamp: int = Field(default_factory=_now_millis)


def store_to_dto(store: Optional[Store]) -> Optional[StoreDTO]:
    if store is None:
        return None
    return StoreDTO(id=store.id, address=store.address, description=store.description)


def stores_to_dto_list(stores: Optional[Iterable[Store]]) -> List[StoreDTO]:
    if not stores:
        return []
    return [store_to_dto(store) for store in stores]


def store_from_dto(dto: Optional[StoreDTO]) -> Optional[Store]:
    if dto is None:
        return None
    return Store(id=dto.id, address=dto.address, description=dto.description)


def user_to_dto(user: Optional[User]) -> Optional[UserDTO]:
    if user is None:
        return None
    return UserDTO(
        email=user.email,
        name=user.name,
        role=user.role.value if user.role is not None else None,
    )


def users_to_dto_list(users: Optional[Iterable[User]]) -> List[UserDTO]:
    if not users:
        return []
    return [user_to_dto(user) for user in users]


def user_from_dto(dto: Optional[UserDTO], encrypted_password: str) -> Optional[User]:
    """Rebuild a :class:`User` from ``dto``.

    The DTO carries no password, so the already-encrypted value must be
    supplied by the caller. An unknown role string raises ``ValueError``.
    """

    if dto is None:
        return None
    role = UserRole(dto.role) if dto.role is not None else UserRole.USER
    return User(email=dto.email, password=encrypted_password, name=dto.name, role=role)


__all__ = [
    "ErrorResponse",
    "StoreDTO",
    "UserDTO",
    "store_from_dto",
    "store_to_dto",
    "stores_to_dto_list",
    "user_from_dto",
    "user_to_dto",
    "users_to_dto_list",
]

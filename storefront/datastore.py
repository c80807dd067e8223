"""Persistence interface for stores and users plus an in-memory implementation."""

from __future__ import annotations

import threading
from typing import Dict, List, Optional, Protocol

from .models import Store, User


class DataStore(Protocol):
    """Key-addressed storage for :class:`Store` and :class:`User` entities."""

    def get_store_by_id(self, store_id: str) -> Optional[Store]: ...

    def get_all_stores(self) -> List[Store]: ...

    def persist_store(self, store: Store) -> Store: ...

    def does_store_exist(self, store_id: str) -> bool: ...

    def remove_store(self, store_id: str) -> bool: ...

    def get_user_by_email(self, email: str) -> Optional[User]: ...

    def get_all_users(self) -> List[User]: ...

    def persist_user(self, user: User) -> User: ...

    def does_user_exist(self, email: str) -> bool: ...

    def remove_user(self, email: str) -> bool: ...


class InMemoryDataStore:
    """Thread-safe dictionary backed data store, preserving insertion order."""

    def __init__(self) -> None:
        self._stores: Dict[str, Store] = {}
        self._users: Dict[str, User] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Stores
    # ------------------------------------------------------------------
    def get_store_by_id(self, store_id: str) -> Optional[Store]:
        with self._lock:
            return self._stores.get(store_id)

    def get_all_stores(self) -> List[Store]:
        with self._lock:
            return list(self._stores.values())

    def persist_store(self, store: Store) -> Store:
        with self._lock:
            self._stores[store.id] = store
        return store

    def does_store_exist(self, store_id: str) -> bool:
        with self._lock:
            return store_id in self._stores

    def remove_store(self, store_id: str) -> bool:
        with self._lock:
            return self._stores.pop(store_id, None) is not None

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            return self._users.get(email)

    def get_all_users(self) -> List[User]:
        with self._lock:
            return list(self._users.values())

    def persist_user(self, user: User) -> User:
        with self._lock:
            self._users[user.email] = user
        return user

    def does_user_exist(self, email: str) -> bool:
        with self._lock:
            return email in self._users

    def remove_user(self, email: str) -> bool:
        with self._lock:
            return self._users.pop(email, None) is not None


__all__ = ["DataStore", "InMemoryDataStore"]

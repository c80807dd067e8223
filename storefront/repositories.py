"""Repositories mapping one-to-one onto the data store for each entity type."""

from __future__ import annotations

from typing import List, Optional

from .datastore import DataStore
from .models import Store, User


class StoreRepository:
    """Store persistence, delegating every call to the data store."""

    def __init__(self, data_store: DataStore) -> None:
        self._data_store = data_store

    def find_by_id(self, store_id: str) -> Optional[Store]:
        return self._data_store.get_store_by_id(store_id)

    def find_all(self) -> List[Store]:
        return self._data_store.get_all_stores()

    def save(self, store: Store) -> Store:
        """Insert or update ``store``."""
        return self._data_store.persist_store(store)

    def exists_by_id(self, store_id: str) -> bool:
        return self._data_store.does_store_exist(store_id)

    def delete_by_id(self, store_id: str) -> bool:
        return self._data_store.remove_store(store_id)


class UserRepository:
    """User persistence, delegating every call to the data store."""

    def __init__(self, data_store: DataStore) -> None:
        self._data_store = data_store

    def find_by_email(self, email: str) -> Optional[User]:
        return self._data_store.get_user_by_email(email)

    def find_all(self) -> List[User]:
        return self._data_store.get_all_users()

    def save(self, user: User) -> User:
        """Insert or update ``user``."""
        return self._data_store.persist_user(user)

    def exists_by_email(self, email: str) -> bool:
        return self._data_store.does_user_exist(email)

    def delete_by_email(self, email: str) -> bool:
        return self._data_store.remove_user(email)


__all__ = ["StoreRepository", "UserRepository"]

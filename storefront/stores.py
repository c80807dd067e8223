"""Business operations for stores."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional

from .models import Store, User
from .repositories import StoreRepository

logger = logging.getLogger("storefront.stores")


class StoreError(Exception):
    """Raised when a store operation violates a business rule."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def _caller(context: Optional[User]) -> str:
    return context.email if context is not None else "anonymous"


class StoreService:
    """Show, provision, update and delete stores through the repository."""

    def __init__(self, store_repository: StoreRepository) -> None:
        self._stores = store_repository

    def get_all_stores(self) -> List[Store]:
        return list(self._stores.find_all())

    def show_store(self, store_id: str, context: Optional[User] = None) -> Store:
        store = self._stores.find_by_id(store_id)
        if store is None:
            raise StoreError(f"Store Does Not Exist: {store_id}")
        logger.debug("Store %s read by %s", store_id, _caller(context))
        return store

    def provision_store(
        self,
        store_id: Optional[str],
        description: Optional[str],
        address: Optional[str],
        context: Optional[User] = None,
    ) -> Store:
        if store_id is None or not store_id.strip():
            raise StoreError("Store ID is required")
        if self._stores.exists_by_id(store_id):
            raise StoreError(f"Store Already Exists: {store_id}")

        store = self._stores.save(Store(id=store_id, address=address, description=description))
        logger.info("Store %s provisioned by %s", store.id, _caller(context))
        return store

    def update_store(
        self,
        store_id: str,
        description: Optional[str] = None,
        address: Optional[str] = None,
    ) -> Store:
        store = self._stores.find_by_id(store_id)
        if store is None:
            raise StoreError(f"Store Does Not Exist: {store_id}")

        if description is not None and description.strip():
            store = replace(store, description=description)
        if address is not None and address.strip():
            store = replace(store, address=address)
        return self._stores.save(store)

    def delete_store(self, store_id: str) -> None:
        if not self._stores.delete_by_id(store_id):
            raise StoreError(f"Store Does Not Exist: {store_id}")
        logger.info("Store %s deleted", store_id)


__all__ = ["StoreError", "StoreService"]

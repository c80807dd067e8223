from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from storefront.datastore import InMemoryDataStore
from storefront.models import Store, User
from storefront.repositories import StoreRepository
from storefront.stores import StoreError, StoreService


@pytest.fixture()
def service() -> StoreService:
    return StoreService(StoreRepository(InMemoryDataStore()))


def test_provision_and_show_store(service: StoreService) -> None:
    caller = User(email="manager@example.com", password="hash")
    created = service.provision_store("S-1", "Downtown", "1 Main St", caller)

    assert created == Store(id="S-1", address="1 Main St", description="Downtown")
    assert service.show_store("S-1") == created
    assert service.get_all_stores() == [created]


def test_provision_with_only_id(service: StoreService) -> None:
    created = service.provision_store("S-2", None, None)

    assert created.address is None
    assert created.description is None


@pytest.mark.parametrize("store_id", [None, "", "   "])
def test_provision_requires_id(service: StoreService, store_id) -> None:
    with pytest.raises(StoreError) as excinfo:
        service.provision_store(store_id, "desc", "addr")
    assert excinfo.value.message == "Store ID is required"


def test_provision_duplicate_fails(service: StoreService) -> None:
    service.provision_store("S-1", "Downtown", None)

    with pytest.raises(StoreError, match="Already Exists"):
        service.provision_store("S-1", "Other", None)


def test_show_unknown_store_fails(service: StoreService) -> None:
    with pytest.raises(StoreError, match="Does Not Exist: S-404"):
        service.show_store("S-404")


def test_update_only_changes_supplied_fields(service: StoreService) -> None:
    service.provision_store("S-1", "Downtown", "1 Main St")

    updated = service.update_store("S-1", None, "2 Side St")
    assert updated == Store(id="S-1", address="2 Side St", description="Downtown")

    updated = service.update_store("S-1", "Uptown", "")
    assert updated == Store(id="S-1", address="2 Side St", description="Uptown")
    assert service.show_store("S-1") == updated


def test_update_unknown_store_fails(service: StoreService) -> None:
    with pytest.raises(StoreError):
        service.update_store("S-404", "desc", None)


def test_delete_store(service: StoreService) -> None:
    service.provision_store("S-1", None, None)

    service.delete_store("S-1")

    assert service.get_all_stores() == []
    with pytest.raises(StoreError):
        service.delete_store("S-1")

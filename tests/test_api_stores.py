"""End-to-end tests for the store endpoints."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from storefront.api import create_app
from storefront.config import Settings
from storefront.database import Database


@pytest.fixture()
def client(tmp_path: Path):
    database = Database(tmp_path / "storefront.sqlite3")
    database.initialize()
    settings = Settings(database_path=database.path)
    app = create_app(data_store=database, settings=settings)
    with TestClient(app) as test_client:
        yield test_client


def _assert_error(response, status_code: int, message: str | None = None) -> None:
    assert response.status_code == status_code, response.text
    payload = response.json()
    assert payload["status"] == status_code
    assert isinstance(payload["timestamp"], int)
    if message is not None:
        assert payload["message"] == message


def test_create_and_list_stores(client: TestClient) -> None:
    created = client.post(
        "/api/v1/stores",
        data={"storeId": "DEAL-001", "address": "1 Main St", "description": "Flagship"},
    )
    assert created.status_code == 201, created.text
    assert created.json() == {"id": "DEAL-001", "address": "1 Main St", "description": "Flagship"}

    listing = client.get("/api/v1/stores")
    assert listing.status_code == 200
    assert listing.json() == [created.json()]

    single = client.get("/api/v1/stores/DEAL-001")
    assert single.status_code == 200
    assert single.json() == created.json()


def test_create_with_only_id(client: TestClient) -> None:
    created = client.post("/api/v1/stores", params={"storeId": "S-2"})

    assert created.status_code == 201
    assert created.json() == {"id": "S-2", "address": None, "description": None}


def test_legacy_name_parameter_used_as_description(client: TestClient) -> None:
    created = client.post("/api/v1/stores", data={"storeId": "S-3", "name": "Corner shop"})
    assert created.json()["description"] == "Corner shop"

    preferred = client.post("/api/v1/stores", data={"storeId": "S-4", "name": "Old", "description": "New"})
    assert preferred.json()["description"] == "New"


def test_create_requires_store_id(client: TestClient) -> None:
    _assert_error(client.post("/api/v1/stores", data={"address": "x"}), 400, "storeId is required")
    _assert_error(client.post("/api/v1/stores", data={"storeId": "   "}), 400, "storeId is required")


def test_duplicate_store_is_domain_failure(client: TestClient) -> None:
    client.post("/api/v1/stores", data={"storeId": "S-1"})

    _assert_error(client.post("/api/v1/stores", data={"storeId": "S-1"}), 400, "Store Already Exists: S-1")


def test_unknown_store_is_reported_as_bad_request(client: TestClient) -> None:
    _assert_error(client.get("/api/v1/stores/S-404"), 400, "Store Does Not Exist: S-404")
    _assert_error(client.put("/api/v1/stores/S-404", data={"address": "x"}), 400)
    _assert_error(client.delete("/api/v1/stores/S-404"), 400)


def test_update_store_partially(client: TestClient) -> None:
    client.post("/api/v1/stores", data={"storeId": "S-1", "address": "1 Main St", "description": "Flagship"})

    updated = client.put("/api/v1/stores/S-1", params={"address": "9 High St"})

    assert updated.status_code == 200, updated.text
    assert updated.json() == {"id": "S-1", "address": "9 High St", "description": "Flagship"}


def test_update_and_delete_require_id(client: TestClient) -> None:
    _assert_error(client.put("/api/v1/stores", data={"address": "x"}), 400, "storeId is required in the path")
    _assert_error(client.delete("/api/v1/stores"), 400, "storeId is required in the path")


def test_delete_store(client: TestClient) -> None:
    client.post("/api/v1/stores", data={"storeId": "S-1"})

    deleted = client.delete("/api/v1/stores/S-1")
    assert deleted.status_code == 204
    assert deleted.content == b""

    _assert_error(client.get("/api/v1/stores/S-1"), 400)
    assert client.get("/api/v1/stores").json() == []


def test_extra_path_segments_are_ignored(client: TestClient) -> None:
    client.post("/api/v1/stores", data={"storeId": "S-1"})

    response = client.get("/api/v1/stores/S-1/inventory")

    assert response.status_code == 200
    assert response.json()["id"] == "S-1"


def test_authenticated_caller_is_attributed(client: TestClient, caplog) -> None:
    client.post("/api/v1/users", data={"email": "m@example.com", "password": "manager-pass"})

    with caplog.at_level(logging.INFO, logger="storefront.stores"):
        created = client.post(
            "/api/v1/stores",
            data={"storeId": "S-9"},
            auth=("m@example.com", "manager-pass"),
        )

    assert created.status_code == 201
    assert "Store S-9 provisioned by m@example.com" in caplog.text


def test_custom_api_prefix(tmp_path: Path) -> None:
    database = Database(tmp_path / "prefixed.sqlite3")
    settings = Settings(database_path=database.path, api_prefix="/v2")

    app = create_app(settings=settings)

    with TestClient(app) as client:
        assert client.post("/v2/stores", data={"storeId": "S-1"}).status_code == 201
        assert client.get("/api/v1/stores").status_code == 404

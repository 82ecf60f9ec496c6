"""Fixtures for todoapi integration tests against a real MongoDB.

Point them at a server with ``TODOAPI_TEST_MONGO_URI`` (default
``mongodb://localhost:27017``). Every test is skipped when it is unreachable.
"""

import os
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from todoapi.context import AppContext
from todoapi.core.settings import get_todoapi_config, reset_todoapi_config
from todoapi.service import TodoApiService

TEST_MONGO_URI = os.environ.get("TODOAPI_TEST_MONGO_URI", "mongodb://localhost:27017")
TEST_DB_NAME = "todoapi_test"


def _mongo_available() -> bool:
    client = MongoClient(TEST_MONGO_URI, serverSelectionTimeoutMS=2000)
    try:
        client.admin.command("ping")
        return True
    except PyMongoError:
        return False
    finally:
        client.close()


@pytest.fixture(scope="session")
def mongo_available() -> bool:
    return _mongo_available()


@pytest.fixture(autouse=True)
def _require_mongo(mongo_available):
    if not mongo_available:
        pytest.skip(f"MongoDB not reachable at {TEST_MONGO_URI}")


@pytest.fixture
def test_db(monkeypatch) -> Generator[None, None, None]:
    """Point the service at a clean test database and drop it afterwards."""
    monkeypatch.setenv("TODOAPI__MONGO_URI", TEST_MONGO_URI)
    monkeypatch.setenv("TODOAPI__MONGO_DB", TEST_DB_NAME)
    monkeypatch.setenv("TODOAPI__LOG_TO_FILE", "false")
    reset_todoapi_config()

    sync_client = MongoClient(TEST_MONGO_URI)
    sync_client.drop_database(TEST_DB_NAME)
    yield
    sync_client.drop_database(TEST_DB_NAME)
    sync_client.close()
    reset_todoapi_config()


@pytest.fixture
def client(test_db) -> Generator[TestClient, None, None]:
    """A service with its own Motor client, started through its lifespan."""
    service = TodoApiService(context=AppContext.from_settings(get_todoapi_config()))
    with TestClient(service.app) as client:
        yield client


@pytest.fixture
def mongo(test_db):
    """Synchronous handle on the test database for checking what was stored."""
    sync_client = MongoClient(TEST_MONGO_URI)
    yield sync_client[TEST_DB_NAME]
    sync_client.close()


@pytest.fixture
def signup(client):
    def _signup(email: str, password: str = "pass123"):
        response = client.post("/users", json={"email": email, "password": password})
        assert response.status_code == 201, response.text
        return response.json(), {"x-auth": response.headers["x-auth"]}

    return _signup

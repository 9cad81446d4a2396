# tests/conftest.py

import os
import sys
import uuid

# Add the project root (the folder containing `app/`) to sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from app.main import app
from app.db.mongo import ensure_indexes, get_db
from app.models.pictogram import Pictogram


def make_pictogram(pictogram_id: int, search_text: str = "q", language: str = "es") -> Pictogram:
    return Pictogram(
        id=pictogram_id,
        search_text=search_text,
        language=language,
        keywords=[f"kw{pictogram_id}"],
        image_url=f"https://static.arasaac.org/pictograms/{pictogram_id}/{pictogram_id}_500.png",
    )


@pytest_asyncio.fixture
async def store():
    """In-memory Motor database for service-level tests."""
    database = AsyncMongoMockClient()[f"lexipic_test_{uuid.uuid4().hex}"]
    await ensure_indexes(database)
    return database


@pytest.fixture
def mock_db():
    return AsyncMongoMockClient()[f"lexipic_test_{uuid.uuid4().hex}"]


@pytest.fixture
def client(mock_db):
    async def _get_test_db():
        await ensure_indexes(mock_db)
        return mock_db

    app.dependency_overrides[get_db] = _get_test_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client):
    """Register a user through the API and return (user_id, auth headers)."""
    def _register(name: str):
        response = client.post("/api/auth/register", json={
            "email": f"{name.lower()}@example.com",
            "password": "s3cret-pass",
            "name": name,
        })
        assert response.status_code == 201, response.text
        body = response.json()
        return body["user"]["id"], {"Authorization": f"Bearer {body['token']}"}
    return _register


@pytest.fixture
def live_client(mock_db, monkeypatch):
    """
    Client sharing one event loop across requests and websockets, as a server
    process would. Realtime fan-out needs every connection on the same loop.
    """
    from app import main

    async def _skip(*args, **kwargs):
        return None

    async def _get_test_db():
        await ensure_indexes(mock_db)
        return mock_db

    monkeypatch.setattr(main, "verify_mongodb_connection", _skip)
    monkeypatch.setattr(main, "ensure_indexes", _skip)
    app.dependency_overrides[get_db] = _get_test_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

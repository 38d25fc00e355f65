"""
DocStore CRUD — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_collection: AsyncMock-backed collection (assert on store calls)
    ├── memory_collection: InMemoryCollection (multi-step workflows)
    ├── user_resource / employee_resource: Resource descriptors
    ├── make_client: builds an HTTPX AsyncClient around any app + collection
    └── test_client: AsyncClient on the default app, backed by mock_collection

No test needs a running MongoDB: every app under test has
`get_mongo_client` overridden with a fake client whose
client[db][collection] lookup returns the fixture collection.
"""

import copy
import os
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from pymongo import ReturnDocument

# Override settings for testing BEFORE any app imports
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["MONGO_URL"] = "mongodb://test-host:27017"

from docstore_crud.config import Settings  # noqa: E402
from docstore_crud.database import get_mongo_client  # noqa: E402
from docstore_crud.resources import build_resources  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Storage Doubles
# ══════════════════════════════════════════════════════════════════════════

class InMemoryCollection:
    """
    Dict-backed stand-in for the five collection methods DocumentService uses.

    Documents are deep-copied in and out so callers can't mutate stored state.
    Only `{"_id": ...}` filters and `$set` updates are understood.
    """

    def __init__(self):
        self.documents: Dict[ObjectId, Dict[str, Any]] = {}

    async def insert_one(self, document: Dict[str, Any]):
        stored = copy.deepcopy(document)
        stored["_id"] = ObjectId()
        self.documents[stored["_id"]] = stored
        return SimpleNamespace(inserted_id=stored["_id"])

    async def find_one(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        document = self.documents.get(query["_id"])
        return copy.deepcopy(document) if document is not None else None

    def find(self, query: Dict[str, Any]):
        snapshot: List[Dict[str, Any]] = [copy.deepcopy(d) for d in self.documents.values()]

        async def to_list(length: Optional[int] = None):
            return snapshot

        return SimpleNamespace(to_list=to_list)

    async def find_one_and_update(self, query, update, return_document=ReturnDocument.BEFORE):
        document = self.documents.get(query["_id"])
        if document is None:
            return None
        before = copy.deepcopy(document)
        document.update(update["$set"])
        return copy.deepcopy(document) if return_document == ReturnDocument.AFTER else before

    async def find_one_and_delete(self, query):
        return self.documents.pop(query["_id"], None)


def fake_client_for(collection) -> MagicMock:
    """A client whose client[db][name] lookup always lands on `collection`."""
    client = MagicMock()
    client.__getitem__.return_value.__getitem__.return_value = collection
    client.admin.command = AsyncMock(return_value={"ok": 1.0})
    return client


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture(name="fake_client_for")
def fake_client_factory():
    """The fake_client_for builder, for tests that need to tweak the client."""
    return fake_client_for


@pytest.fixture
def mock_collection():
    """
    Mock AsyncCollection.

    Usage:
        mock_collection.find_one_and_delete.return_value = {"_id": oid, ...}
        mock_collection.find.return_value.to_list.return_value = [...]
    """
    collection = MagicMock()
    collection.insert_one = AsyncMock()
    collection.find_one = AsyncMock()
    collection.find_one_and_update = AsyncMock()
    collection.find_one_and_delete = AsyncMock()
    collection.find.return_value.to_list = AsyncMock(return_value=[])
    return collection


@pytest.fixture
def memory_collection():
    return InMemoryCollection()


@pytest.fixture
def test_settings():
    return Settings()


@pytest.fixture
def user_resource(test_settings):
    return build_resources(test_settings)["user"]


@pytest.fixture
def employee_resource(test_settings):
    return build_resources(test_settings)["employee"]


@pytest.fixture
def make_client():
    """
    Factory: wrap an app and a collection double in an HTTPX AsyncClient.

    Usage:
        async with make_client(app, memory_collection) as client:
            response = await client.get("/user")
    """

    def _make(app, collection, client=None):
        app.dependency_overrides[get_mongo_client] = lambda: client or fake_client_for(collection)
        transport = ASGITransport(app=app)
        return AsyncClient(transport=transport, base_url="http://test")

    return _make


@pytest_asyncio.fixture
async def test_client(mock_collection, make_client):
    """
    HTTPX AsyncClient on the default application, storage mocked.

    Usage:
        async def test_list(test_client, mock_collection):
            response = await test_client.get("/user")
            assert response.status_code == 200
    """
    from docstore_crud.main import app

    async with make_client(app, mock_collection) as client:
        yield client
    app.dependency_overrides.clear()

"""Shared pytest fixtures."""

from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from typing import Any
from uuid import UUID

import pytest

from magicauth.app import App
from magicauth.config import Config
from magicauth.core.core import Core
from magicauth.core.modules.magic_link.encryption import FernetEncryptor
from magicauth.core.modules.user.models import Team, User

OPERATORS = {
    "$gt": lambda value, bound: value > bound,
    "$gte": lambda value, bound: value >= bound,
    "$lt": lambda value, bound: value < bound,
    "$lte": lambda value, bound: value <= bound,
}


def matches(document: dict[str, Any], query: dict[str, Any]) -> bool:
    for key, condition in query.items():
        if key not in document:
            return False
        value = document[key]
        if isinstance(condition, dict):
            if not all(OPERATORS[op](value, bound) for op, bound in condition.items()):
                return False
        elif value != condition:
            return False
    return True


class FakeCollection:
    """In-memory stand-in for the subset of AsyncCollection the services use."""

    def __init__(self) -> None:
        self.documents: list[dict[str, Any]] = []
        self.indexes: list[list[tuple[str, int]]] = []

    async def create_index(self, keys: list[tuple[str, int]], **_: Any) -> str:
        self.indexes.append(keys)
        return "_".join(f"{name}_{direction}" for name, direction in keys)

    async def insert_one(self, document: dict[str, Any]) -> SimpleNamespace:
        if any(existing["_id"] == document["_id"] for existing in self.documents):
            raise ValueError(f"Duplicate _id {document['_id']}")
        self.documents.append(dict(document))
        return SimpleNamespace(inserted_id=document["_id"])

    async def find_one(self, query: dict[str, Any], projection: dict[str, int] | None = None) -> dict[str, Any] | None:
        for document in self.documents:
            if matches(document, query):
                if projection is None:
                    return dict(document)
                return {key: value for key, value in document.items() if key in projection or key == "_id"}
        return None

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        for document in self.documents:
            if matches(document, query):
                document.update(update["$set"])
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)


class FakeDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


class FakeMongoClient:
    def __init__(self) -> None:
        self.databases: dict[str, FakeDatabase] = {}
        self.closed = False

    def get_database(self, name: str) -> FakeDatabase:
        return self.databases.setdefault(name, FakeDatabase())

    async def aclose(self) -> None:
        self.closed = True


class FakeClock:
    """Controllable clock; call it to read the current time."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current += delta


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 15, 12, 0, tzinfo=UTC))


@pytest.fixture
def config():
    return Config(database_url="mongodb://localhost:27017/magicauth_test", magic_link_secret="test-secret")


@pytest.fixture
def mongo_client():
    return FakeMongoClient()


@pytest.fixture
def database(mongo_client):
    return mongo_client.get_database("magicauth_test")


@pytest.fixture
def core(config, mongo_client, clock):
    return Core(config, mongo_client, FernetEncryptor(config.magic_link_secret), clock)


@pytest.fixture
def app(config, mongo_client, clock):
    return App(config, mongo_client, clock)


@pytest.fixture
async def mock_user(database, clock):
    """Insert a user directly into the users collection."""
    user = User(
        id=UUID("87654321-4321-8765-4321-876543218765"),
        email="kody@example.com",
        first_name="Kody",
        team=Team.BLUE,
        created_at=clock(),
        updated_at=clock(),
    )
    await database.get_collection("users").insert_one(user.to_mongo())
    return user

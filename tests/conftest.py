"""Shared fixtures: an in-memory stand-in for pymongo.MongoClient and a manual clock."""

from __future__ import annotations

import os
from typing import Any, Callable

import pytest
from pymongo.errors import InvalidName, OperationFailure, ServerSelectionTimeoutError

from mongo_ros.config.settings import get_settings


class FakeServer:
    """State shared by every fake client: reachability, users and stored documents."""

    def __init__(self) -> None:
        self.reachable = True
        self.unreachable_clients = 0
        self.users: dict[str, str] = {}
        self.databases: dict[str, dict[str, list[dict[str, Any]]]] = {}
        self.clients: list[FakeMongoClient] = []
        self.on_command: Callable[[FakeMongoClient], None] | None = None

    def seed(self, db: str, collection: str, *docs: dict[str, Any]) -> None:
        self.databases.setdefault(db, {}).setdefault(collection, []).extend(dict(d) for d in docs)


def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    return all(doc.get(key) == value for key, value in query.items())


class FakeCollection:
    def __init__(self, client: FakeMongoClient, db: str, name: str) -> None:
        self._client = client
        self._db = db
        self._name = name

    def _docs(self) -> list[dict[str, Any]]:
        self._client._check()
        return self._client.server.databases.get(self._db, {}).get(self._name, [])

    def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        for doc in self._docs():
            if _matches(doc, query):
                return dict(doc)
        return None

    def find(self, query: dict[str, Any] | None = None, projection: Any = None) -> list[dict[str, Any]]:
        return [dict(doc) for doc in self._docs() if _matches(doc, query or {})]

    def update_one(self, query: dict[str, Any], update: dict[str, Any], upsert: bool = False) -> None:
        for doc in self._docs():
            if _matches(doc, query):
                doc.update(update["$set"])
                return
        if upsert:
            self._client.server.seed(self._db, self._name, {**query, **update["$set"]})


class FakeDatabase:
    def __init__(self, client: FakeMongoClient, name: str) -> None:
        self._client = client
        self.name = name

    def __getitem__(self, collection: str) -> FakeCollection:
        return FakeCollection(self._client, self.name, collection)

    def command(self, name: str) -> dict[str, Any]:
        self._client._check()
        return {"ok": 1.0}


class FakeMongoClient:
    def __init__(self, server: FakeServer, **kwargs: Any) -> None:
        self.server = server
        self.kwargs = kwargs
        self.closed = False
        self.unreachable = server.unreachable_clients > 0
        if self.unreachable:
            server.unreachable_clients -= 1
        server.clients.append(self)

    def _check(self) -> None:
        if self.server.on_command is not None:
            self.server.on_command(self)
        if self.closed:
            raise ServerSelectionTimeoutError("client is closed")
        if self.unreachable or not self.server.reachable:
            raise ServerSelectionTimeoutError(f"{self.kwargs.get('host')}:{self.kwargs.get('port')}: Connection refused")
        username = self.kwargs.get("username")
        if username is not None and self.server.users.get(username) != self.kwargs.get("password"):
            raise OperationFailure("Authentication failed.", code=18)

    @property
    def admin(self) -> FakeDatabase:
        return FakeDatabase(self, "admin")

    def __getitem__(self, name: str) -> FakeDatabase:
        if not name:
            raise InvalidName("database name cannot be the empty string")
        return FakeDatabase(self, name)

    def drop_database(self, name: str) -> None:
        self._check()
        self.server.databases.pop(name, None)

    def list_database_names(self) -> list[str]:
        self._check()
        return sorted(name for name, colls in self.server.databases.items() if any(colls.values()))

    def close(self) -> None:
        self.closed = True


class FakeClock:
    """Manual clock; sleeping advances it instantly."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def time(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def client_factory(fake_server: FakeServer) -> Callable[..., FakeMongoClient]:
    def _factory(**kwargs: Any) -> FakeMongoClient:
        return FakeMongoClient(fake_server, **kwargs)

    return _factory


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Keep WAREHOUSE_* variables and a local .env out of the tests."""
    for key in list(os.environ):
        if key.upper().startswith("WAREHOUSE_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

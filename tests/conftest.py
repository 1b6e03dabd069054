"""
Shared fixtures.

MongoDB is replaced by mongomock behind a thin async wrapper shaped like
the parts of pymongo's AsyncMongoClient that the app and beanie touch.
The wrapper is injected through the ConnectionManager's client_factory,
so the real connect/retry logic and the beanie initialization run.
"""
import functools
from typing import Any, Dict, List

import mongomock
import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from neoride.core.config import Settings
from neoride.core.database import ConnectionManager
from neoride.main import create_app
from neoride.repositories.odm import init_documents

TEST_URI = "mongodb://test.invalid/NeoRide"


class AsyncMockCollection:
    """
    Exposes a mongomock collection's methods as coroutines.
    A method named in the client's `collection_errors` raises that error.
    """

    def __init__(self, collection, client=None):
        self._collection = collection
        self._client = client

    def __getattr__(self, name):
        attr = getattr(self._collection, name)
        if not callable(attr):
            return attr

        @functools.wraps(attr)
        async def call(*args, **kwargs):
            if self._client is not None and name in self._client.collection_errors:
                raise self._client.collection_errors[name]
            return attr(*args, **kwargs)

        return call


class AsyncMockDatabase:
    def __init__(self, database, client=None):
        self._database = database
        self.client = client

    @property
    def name(self) -> str:
        return self._database.name

    def __getitem__(self, name) -> AsyncMockCollection:
        return AsyncMockCollection(self._database[name], client=self.client)

    async def list_collection_names(self, **kwargs):
        return self._database.list_collection_names()

    async def command(self, command, **kwargs):
        if self.client is not None and self.client.ping_error is not None:
            raise self.client.ping_error
        if command == {"buildInfo": 1}:
            return {"version": "7.0.0", "ok": 1.0}
        return self._database.command(command, **kwargs)


class FakeMongoClient:
    """Stands in for AsyncMongoClient; every instance shares one backend."""

    def __init__(self, backend: mongomock.MongoClient, uri: str, ping_error=None, **options):
        self.uri = uri
        self.options = options
        self.ping_error = ping_error
        self.collection_errors: Dict[str, Exception] = {}
        self.metadata: List[Any] = []
        self.closed = False
        self._backend = backend
        self.admin = AsyncMockDatabase(backend.admin, client=self)

    @property
    def listeners(self) -> List[Any]:
        return self.options.get("event_listeners", [])

    def get_default_database(self, default=None):
        return AsyncMockDatabase(self._backend[default], client=self)

    def append_metadata(self, driver_info) -> None:
        self.metadata.append(driver_info)

    async def close(self):
        self.closed = True


class FakeClientFactory:
    """
    Records every client it hands out. `failures` dials in a row answer
    the initial ping with a server selection timeout.
    """

    def __init__(self, backend: mongomock.MongoClient):
        self.backend = backend
        self.failures = 0
        self.clients: List[FakeMongoClient] = []

    def __call__(self, uri, **options) -> FakeMongoClient:
        ping_error = None
        if self.failures > 0:
            self.failures -= 1
            ping_error = ServerSelectionTimeoutError("connection refused")
        client = FakeMongoClient(self.backend, uri, ping_error=ping_error, **options)
        self.clients.append(client)
        return client

    @property
    def latest(self) -> FakeMongoClient:
        return self.clients[-1]


class RecordingSleep:
    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def backend():
    return mongomock.MongoClient()


@pytest.fixture
def client_factory(backend):
    return FakeClientFactory(backend)


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def settings():
    return Settings(MONGODB_URI=TEST_URI, ENVIRONMENT="test", _env_file=None)


def make_manager(settings: Settings, client_factory, sleep, **overrides) -> ConnectionManager:
    options: Dict[str, Any] = {
        "max_attempts": settings.MAX_CONNECT_ATTEMPTS,
        "retry_delay": settings.CONNECT_RETRY_DELAY,
        "client_factory": client_factory,
        "sleep": sleep,
        "client_options": settings.driver_options(),
        "on_connect": init_documents,
    }
    options.update(overrides)
    return ConnectionManager(settings.MONGODB_URI, settings.DATABASE_NAME, **options)


@pytest.fixture
def manager(settings, client_factory, sleep):
    return make_manager(settings, client_factory, sleep)


@pytest.fixture
def app(settings, manager):
    return create_app(settings=settings, connection_manager=manager)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def unconfigured_client(client_factory, sleep):
    """App started without MONGODB_URI."""
    settings = Settings(MONGODB_URI=None, ENVIRONMENT="test", _env_file=None)
    manager = make_manager(settings, client_factory, sleep)
    app = create_app(settings=settings, connection_manager=manager)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def customer_payload() -> Dict[str, Any]:
    return {
        "externalId": "u1",
        "email": "A@B.com",
        "fullName": "Jo",
        "phone": "555",
    }


@pytest.fixture
def driver_payload() -> Dict[str, Any]:
    return {
        "externalId": "d1",
        "email": "Driver@NeoRide.io",
        "fullName": "Sam Driver",
        "phone": "+15550100",
        "licenseNumber": "LIC-1001",
        "vehicleModel": "Toyota Corolla",
        "vehiclePlate": "abc123",
    }

import asyncio
from types import SimpleNamespace

import pytest
from pymongo.errors import AutoReconnect

from neoride.core.database import ConnectionManager, ConnectionState
from neoride.core.errors import (
    ConfigurationMissingError,
    ConnectionExhaustedError,
    DatabaseConnectionError,
)


async def test_missing_uri_fails_without_dialing(manager, client_factory, sleep):
    manager.uri = None

    with pytest.raises(ConfigurationMissingError) as exc_info:
        await manager.connect()

    assert exc_info.value.to_response() == {
        "error": "MONGODB_URI environment variable is not set",
        "code": "ConfigurationMissing",
    }
    assert manager.attempts == 0
    assert client_factory.clients == []
    assert sleep.delays == []
    assert manager.state is ConnectionState.DISCONNECTED


async def test_connect_caches_handle(manager, client_factory):
    first = await manager.connect()
    second = await manager.connect()

    assert len(client_factory.clients) == 1
    assert first.name == "NeoRide"
    assert second.name == first.name
    assert manager.state is ConnectionState.CONNECTED
    assert manager.is_connected
    assert manager.attempts == 0


async def test_connect_passes_driver_options(manager, client_factory, settings):
    await manager.connect()

    options = client_factory.latest.options
    assert options["serverSelectionTimeoutMS"] == settings.SERVER_SELECTION_TIMEOUT_MS
    assert options["connectTimeoutMS"] == settings.CONNECT_TIMEOUT_MS
    assert options["socketTimeoutMS"] == settings.SOCKET_TIMEOUT_MS
    assert len(client_factory.latest.listeners) == 1


async def test_connect_retries_after_failure(manager, client_factory, sleep):
    client_factory.failures = 2

    database = await manager.connect()

    assert database.name == "NeoRide"
    assert len(client_factory.clients) == 3
    assert sleep.delays == [2.0, 2.0]
    # Failed clients are closed before the next dial
    assert client_factory.clients[0].closed
    assert client_factory.clients[1].closed
    assert not client_factory.clients[2].closed
    assert manager.attempts == 0


async def test_connect_gives_up_after_max_attempts(manager, client_factory, sleep):
    client_factory.failures = 5

    with pytest.raises(ConnectionExhaustedError) as exc_info:
        await manager.connect()

    error = exc_info.value
    assert error.attempts == 3
    assert error.to_response()["code"] == "ConnectionExhausted"
    assert "connection refused" in error.message
    assert len(client_factory.clients) == 3
    # No sleep after the last attempt
    assert sleep.delays == [2.0, 2.0]
    assert manager.state is ConnectionState.DISCONNECTED
    assert manager.database is None


async def test_new_burst_after_exhaustion(manager, client_factory):
    client_factory.failures = 3
    with pytest.raises(ConnectionExhaustedError):
        await manager.connect()

    database = await manager.connect()

    assert database.name == "NeoRide"
    assert len(client_factory.clients) == 4


async def test_heartbeat_failure_marks_handle_stale(manager, client_factory):
    await manager.connect()
    first = client_factory.latest

    listener = first.listeners[0]
    listener.failed(SimpleNamespace(reply=Exception("heartbeat timed out")))

    assert manager.state is ConnectionState.DISCONNECTED
    assert manager.database is None

    await manager.connect()

    assert len(client_factory.clients) == 2
    assert first.closed
    assert manager.state is ConnectionState.CONNECTED


async def test_heartbeat_from_old_client_is_ignored(manager, client_factory):
    await manager.connect()
    old_listener = client_factory.latest.listeners[0]
    await manager.disconnect()
    await manager.connect()

    old_listener.failed(SimpleNamespace(reply=None))

    assert manager.state is ConnectionState.CONNECTED


async def test_ping_failure_reports_and_recovers(manager, client_factory):
    await manager.connect()
    client_factory.latest.ping_error = AutoReconnect("server went away")

    with pytest.raises(DatabaseConnectionError):
        await manager.ping()
    assert manager.state is ConnectionState.DISCONNECTED

    reply = await manager.ping()
    assert reply == {"ok": 1.0}
    assert len(client_factory.clients) == 2


async def test_disconnect_closes_client(manager, client_factory):
    await manager.connect()

    await manager.disconnect()

    assert client_factory.latest.closed
    assert manager.state is ConnectionState.DISCONNECTED
    assert not manager.is_connected


async def test_disconnect_without_connection_is_noop(manager):
    await manager.disconnect()
    assert manager.state is ConnectionState.DISCONNECTED


async def test_concurrent_connects_dial_once(manager, client_factory):
    results = await asyncio.gather(*(manager.connect() for _ in range(5)))

    assert len(client_factory.clients) == 1
    assert {database.name for database in results} == {"NeoRide"}


async def test_connect_creates_indexes(manager, backend):
    await manager.connect()

    customer_indexes = backend["NeoRide"]["customers"].index_information()
    driver_indexes = backend["NeoRide"]["drivers"].index_information()

    assert customer_indexes["email_1"]["unique"] is True
    assert customer_indexes["externalId_1"]["unique"] is True
    for field in ("externalId", "email", "licenseNumber", "vehiclePlate"):
        assert driver_indexes[f"{field}_1"]["unique"] is True
    assert "location_2dsphere" in driver_indexes


async def test_index_conflict_does_not_fail_connect(manager, backend, client_factory, sleep):
    backend["NeoRide"]["customers"].insert_many([{"fullName": "Old A"}, {"fullName": "Old B"}])

    database = await manager.connect()

    assert database.name == "NeoRide"
    assert manager.state is ConnectionState.CONNECTED
    assert len(client_factory.clients) == 1
    assert sleep.delays == []
    assert "externalId_1" not in backend["NeoRide"]["customers"].index_information()
    # The other collection still gets its indexes
    assert "vehiclePlate_1" in backend["NeoRide"]["drivers"].index_information()


class HandleLostAfterRead(ConnectionManager):
    """Drops the cached handle right after it is read, like a heartbeat failure on the monitor thread."""

    def __init__(self, *args, **kwargs):
        self._handle = None
        self.lose_on_read = False
        super().__init__(*args, **kwargs)

    @property
    def _database(self):
        handle = self._handle
        if self.lose_on_read:
            self._handle = None
        return handle

    @_database.setter
    def _database(self, value):
        self._handle = value


async def test_connect_reads_cached_handle_once(settings, client_factory, sleep):
    manager = HandleLostAfterRead(
        settings.MONGODB_URI,
        settings.DATABASE_NAME,
        client_factory=client_factory,
        sleep=sleep,
    )
    await manager.connect()
    manager.lose_on_read = True

    database = await manager.connect()

    assert database is not None
    assert database.name == "NeoRide"


def test_clone_is_unconnected(manager):
    trial = manager.clone(max_attempts=1)

    assert trial.max_attempts == 1
    assert trial.uri == manager.uri
    assert trial.state is ConnectionState.DISCONNECTED
    assert trial is not manager


def test_describe(manager):
    assert manager.describe() == {
        "state": 0,
        "stateName": "disconnected",
        "attempts": 0,
        "configured": True,
    }

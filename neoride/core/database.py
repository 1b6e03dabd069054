"""
MongoDB connection lifecycle.

The ConnectionManager owns the one cached client handle of the process.
It is created by the app factory and handed to route handlers through
a FastAPI dependency, never imported as a global.
"""
import asyncio
import enum
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from pymongo import AsyncMongoClient, monitoring
from pymongo.errors import PyMongoError

from neoride.core.errors import (
    ConfigurationMissingError,
    ConnectionExhaustedError,
    DatabaseConnectionError,
)

logger = logging.getLogger(__name__)


class ConnectionState(enum.IntEnum):
    """Readiness states, numbered like the driver's readyState."""
    DISCONNECTED = 0
    CONNECTED = 1
    CONNECTING = 2
    DISCONNECTING = 3


class _HeartbeatListener(monitoring.ServerHeartbeatListener):
    """
    Marks the cached handle stale when the server stops answering heartbeats.

    Heartbeats run on the driver's monitor threads, so this only flips state;
    the stale client is closed by the next connect().
    """

    def __init__(self, manager: "ConnectionManager", generation: int):
        self._manager = manager
        self._generation = generation

    def started(self, event):
        pass

    def succeeded(self, event):
        pass

    def failed(self, event):
        self._manager._mark_stale(self._generation, event.reply)


class ConnectionManager:
    """
    Lazily connects to MongoDB, caches the handle, retries with a fixed delay.

    Usage:
        manager = ConnectionManager(settings.MONGODB_URI, settings.DATABASE_NAME)
        database = await manager.connect()
    """

    def __init__(
        self,
        uri: Optional[str],
        database_name: str,
        *,
        max_attempts: int = 3,
        retry_delay: float = 2.0,
        client_factory: Callable[..., Any] = AsyncMongoClient,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        client_options: Optional[Dict[str, Any]] = None,
        on_connect: Optional[Callable[[Any], Awaitable[None]]] = None,
    ):
        self.uri = uri
        self.database_name = database_name
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.client_options = client_options or {}
        self.attempts = 0

        self._client_factory = client_factory
        self._sleep = sleep
        self._on_connect = on_connect

        self._client = None
        self._database = None
        self._state = ConnectionState.DISCONNECTED
        self._generation = 0
        self._lock = asyncio.Lock()

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_configured(self) -> bool:
        return bool(self.uri)

    @property
    def is_connected(self) -> bool:
        return self._database is not None and self._state is ConnectionState.CONNECTED

    @property
    def database(self):
        """The cached database handle, or None when not connected."""
        database = self._database
        return database if self._state is ConnectionState.CONNECTED else None

    async def connect(self):
        """
        Return the cached database handle, dialing MongoDB if needed.

        Raises:
            ConfigurationMissingError: no connection string configured
            ConnectionExhaustedError: every attempt up to max_attempts failed
        """
        database = self._database
        if database is not None and self._state is ConnectionState.CONNECTED:
            return database

        async with self._lock:
            # Another caller may have connected while we waited for the lock
            database = self._database
            if database is not None and self._state is ConnectionState.CONNECTED:
                logger.debug("Using cached database connection")
                return database

            if not self.uri:
                logger.error("MONGODB_URI is not set; cannot connect")
                raise ConfigurationMissingError()

            self.attempts = 0
            last_error: Optional[PyMongoError] = None

            while self.attempts < self.max_attempts:
                self.attempts += 1

                if self._client is not None or self._state is not ConnectionState.DISCONNECTED:
                    logger.info(f"Clearing stale connection (state={self._state.name}) before retry")
                    await self._close()

                logger.info(f"Connecting to MongoDB (attempt {self.attempts}/{self.max_attempts})...")
                try:
                    database = await self._open()
                except PyMongoError as e:
                    last_error = e
                    logger.error(f"MongoDB connection attempt {self.attempts} failed: {e}")
                    if self.attempts < self.max_attempts:
                        logger.info(f"Retrying in {self.retry_delay:.1f}s")
                        await self._sleep(self.retry_delay)
                    continue

                logger.info(f"Connected to MongoDB database '{database.name}'")
                self.attempts = 0
                return database

            raise ConnectionExhaustedError(self.attempts, last_error) from last_error

    async def _open(self):
        """
        Dial, ping, run on_connect, then cache the handle.
        An error raised by on_connect fails the attempt.
        """
        self._state = ConnectionState.CONNECTING
        self._generation += 1
        listener = _HeartbeatListener(self, self._generation)

        try:
            client = self._client_factory(
                self.uri,
                event_listeners=[listener],
                **self.client_options,
            )
            self._client = client
            await client.admin.command("ping")

            database = client.get_default_database(default=self.database_name)
            if self._on_connect is not None:
                await self._on_connect(database)
        except BaseException:
            await self._close()
            raise

        self._database = database
        self._state = ConnectionState.CONNECTED
        return database

    async def _close(self) -> None:
        client = self._client
        self._database = None
        self._client = None
        if client is not None:
            self._state = ConnectionState.DISCONNECTING
            try:
                await client.close()
            except PyMongoError as e:
                logger.warning(f"Error closing MongoDB client: {e}")
        self._state = ConnectionState.DISCONNECTED

    def _mark_stale(self, generation: int, error: Any = None) -> None:
        if generation != self._generation or self._state is not ConnectionState.CONNECTED:
            return
        logger.warning(f"MongoDB connection lost, clearing cached handle: {error}")
        self._database = None
        self._state = ConnectionState.DISCONNECTED

    async def disconnect(self) -> None:
        """Close the client and clear the cache."""
        async with self._lock:
            if self._client is None:
                return
            await self._close()
            logger.info("MongoDB connection closed")

    async def ping(self) -> Dict[str, Any]:
        """Connect if needed and ping the server."""
        await self.connect()
        try:
            return await self._client.admin.command("ping")
        except PyMongoError as e:
            self._mark_stale(self._generation, e)
            raise DatabaseConnectionError(str(e)) from e

    def clone(self, **overrides) -> "ConnectionManager":
        """A fresh, unconnected manager with the same configuration."""
        options: Dict[str, Any] = {
            "uri": self.uri,
            "database_name": self.database_name,
            "max_attempts": self.max_attempts,
            "retry_delay": self.retry_delay,
            "client_factory": self._client_factory,
            "sleep": self._sleep,
            "client_options": dict(self.client_options),
        }
        options.update(overrides)
        return ConnectionManager(**options)

    def describe(self) -> Dict[str, Any]:
        return {
            "state": int(self._state),
            "stateName": self._state.name.lower(),
            "attempts": self.attempts,
            "configured": self.is_configured,
        }


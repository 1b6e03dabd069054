"""
Diagnostics Service

Backs the health, debug and connection-test endpoints. Each method
returns (status_code, body) because failures here are reports, not errors.
"""
import logging
from typing import Any, Dict, Tuple

from fastapi import Depends
from pymongo.errors import PyMongoError

from neoride.core.config import Settings
from neoride.core.database import ConnectionManager
from neoride.core.dependencies import get_connection_manager, get_settings
from neoride.core.errors import NeoRideError
from neoride.services.base import utcnow

logger = logging.getLogger(__name__)

Report = Tuple[int, Dict[str, Any]]


class DiagnosticsService:
    def __init__(self, connections: ConnectionManager, settings: Settings):
        self.connections = connections
        self.settings = settings

    def environment(self) -> Dict[str, Any]:
        """Environment summary. Never includes the connection string itself."""
        return {
            "environment": self.settings.ENVIRONMENT,
            "mongodbUri": "Set (value hidden)" if self.settings.MONGODB_URI else "Not set",
            "port": self.settings.PORT,
            "vercel": "Running on Vercel" if self.settings.is_vercel else "Not on Vercel",
            "region": self.settings.VERCEL_REGION or "Unknown",
        }

    async def health(self) -> Report:
        """Ping the database through the shared connection."""
        try:
            await self.connections.ping()
        except NeoRideError as e:
            logger.error(f"Health check failed: {e}")
            return 500, {
                "status": "error",
                "message": "Database connection failed",
                "connected": False,
                "mongoState": int(self.connections.state),
                "environment": self.settings.ENVIRONMENT,
                "error": e.message,
                "code": e.code,
                "timestamp": utcnow().isoformat(),
            }

        return 200, {
            "status": "success",
            "message": "API is running",
            "connected": True,
            "mongoState": int(self.connections.state),
            "environment": self.settings.ENVIRONMENT,
            "timestamp": utcnow().isoformat(),
        }

    async def debug_info(self) -> Dict[str, Any]:
        info = self.environment()
        try:
            database = await self.connections.connect()
            info["database"] = database.name
            info["collections"] = sorted(await database.list_collection_names())
        except NeoRideError as e:
            info["databaseError"] = e.message
        except PyMongoError as e:
            logger.error(f"Could not list collections: {e}")
            info["databaseError"] = str(e)

        info["connection"] = self.connections.describe()
        return info

    async def connection_test(self) -> Report:
        """
        Dial a separate, single-attempt connection, ping it, list the
        collections and close it again. The shared connection is untouched.
        """
        environment = self.environment()
        if not self.settings.MONGODB_URI:
            return 500, {
                "status": "error",
                "message": "MONGODB_URI environment variable is not set",
                "environment": environment,
            }

        trial = self.connections.clone(max_attempts=1)
        try:
            logger.info("Attempting direct MongoDB connection test...")
            database = await trial.connect()
            await trial.ping()
            collections = sorted(await database.list_collection_names())
        except (NeoRideError, PyMongoError) as e:
            logger.error(f"MongoDB connection test failed: {e}")
            return 500, {
                "status": "error",
                "message": "MongoDB connection error",
                "connected": False,
                "error": str(e),
                "environment": environment,
            }
        finally:
            await trial.disconnect()

        return 200, {
            "status": "success",
            "message": "Successfully connected to MongoDB",
            "connected": True,
            "collections": collections,
            "environment": environment,
            "timestamp": utcnow().isoformat(),
        }


def get_diagnostics_service(
    connections: ConnectionManager = Depends(get_connection_manager),
    settings: Settings = Depends(get_settings),
) -> DiagnosticsService:
    return DiagnosticsService(connections, settings)

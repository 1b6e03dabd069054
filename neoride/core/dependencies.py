from fastapi import Request

from neoride.core.config import Settings
from neoride.core.database import ConnectionManager


def get_settings(request: Request) -> Settings:
    """
    Dependency returning the settings the app was built with.

    Usage in routes:
        settings: Settings = Depends(get_settings)
    """
    return request.app.state.settings


def get_connection_manager(request: Request) -> ConnectionManager:
    """
    Dependency returning the process-wide connection manager.
    Created by create_app() and stored on app.state.
    """
    return request.app.state.connection_manager

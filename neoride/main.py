import logging
import traceback
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from neoride.api.v1 import AVAILABLE_ROUTES, api_router
from neoride.core.config import Settings, settings as default_settings
from neoride.core.database import ConnectionManager
from neoride.core.errors import NeoRideError
from neoride.repositories.odm import init_documents
from neoride.services.base import utcnow

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_connection_manager(settings: Settings) -> ConnectionManager:
    return ConnectionManager(
        settings.MONGODB_URI,
        settings.DATABASE_NAME,
        max_attempts=settings.MAX_CONNECT_ATTEMPTS,
        retry_delay=settings.CONNECT_RETRY_DELAY,
        client_options=settings.driver_options(),
        on_connect=init_documents,
    )


def create_app(
    settings: Optional[Settings] = None,
    connection_manager: Optional[ConnectionManager] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    The connection manager is owned by the app (app.state) and reaches the
    route handlers through the get_connection_manager dependency.
    """
    settings = settings or default_settings
    connection_manager = connection_manager or build_connection_manager(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.APP_NAME} on port {settings.PORT} ({settings.ENVIRONMENT})")

        if connection_manager.is_configured:
            try:
                logger.info("Connecting to Database...")
                await connection_manager.connect()
            except NeoRideError as e:
                # Requests retry the connection on their own
                logger.error(f"Database Connection FAILED: {e}")
        else:
            logger.warning("MONGODB_URI is not set; database endpoints will report a configuration error")

        logger.info(f"MongoDB status: {connection_manager.state.name.lower()}")
        yield

        logger.info("Shutting down")
        await connection_manager.disconnect()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Customer and driver records for the NeoRide ride-hailing app",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.connection_manager = connection_manager

    # --------------------------------------------------------------------------
    # CORS Middleware
    # --------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    # --------------------------------------------------------------------------
    # Exception Handlers (every failure answers with a JSON "error" field)
    # --------------------------------------------------------------------------
    @app.exception_handler(NeoRideError)
    async def neoride_error_handler(request: Request, exc: NeoRideError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = {}
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"])
            details.setdefault(field, error["msg"])
        return JSONResponse(status_code=400, content={"error": "Validation error", "details": details})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # No route for this path and method
        if exc.status_code in (404, 405):
            logger.info(f"Route not found: {request.method} {request.url.path}")
            return JSONResponse(
                status_code=404,
                content={
                    "error": "Route not found",
                    "requestedPath": request.url.path,
                    "availableRoutes": AVAILABLE_ROUTES,
                    "timestamp": utcnow().isoformat(),
                },
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        error_msg = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        logger.error(f"ERROR OCCURRED AT {request.url.path}:\n{error_msg}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    # --------------------------------------------------------------------------
    # Basic Routes
    # --------------------------------------------------------------------------
    @app.get("/")
    async def root():
        return {
            "message": f"{settings.APP_NAME} is running",
            "version": settings.APP_VERSION,
            "docs": "/docs",
            "endpoints": {
                "health": "/api/health",
                "debug": "/api/debug",
                "customers": "/api/customers",
                "drivers": "/api/drivers",
                "stats": "/api/stats",
            },
            "timestamp": utcnow().isoformat(),
        }

    # --------------------------------------------------------------------------
    # API Routers
    # --------------------------------------------------------------------------
    app.include_router(api_router, prefix="/api")

    return app


configure_logging(default_settings)
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)

"""
API Router

Aggregates all API routes. Mounted under /api by main.py.
"""
from fastapi import APIRouter
from neoride.api.v1 import customers, drivers, stats, system

# Create main API router
api_router = APIRouter()

# Include sub-routers
api_router.include_router(
    system.router,
    tags=["System - Health & Diagnostics"]
)

api_router.include_router(
    customers.router,
    prefix="/customers",
    tags=["Customers"]
)

api_router.include_router(
    drivers.router,
    prefix="/drivers",
    tags=["Drivers"]
)

api_router.include_router(
    stats.router,
    prefix="/stats",
    tags=["Stats"]
)

# Listed in the root directory and in 404 responses
AVAILABLE_ROUTES = [
    "/api/health",
    "/api/debug",
    "/api/customers",
    "/api/drivers",
    "/api/stats",
]

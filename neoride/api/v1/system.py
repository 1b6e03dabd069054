"""
System API Routes

Diagnostics for the serverless deployment:
- GET /health          - Database reachability check (ping)
- GET /debug           - Environment and collection listing
- GET /connection-test - One-off direct connection test
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from neoride.services.diagnostics_service import DiagnosticsService, get_diagnostics_service

router = APIRouter()


@router.get("/health", summary="Health check")
async def health_check(service: DiagnosticsService = Depends(get_diagnostics_service)):
    status_code, body = await service.health()
    return JSONResponse(status_code=status_code, content=body)


@router.get("/debug", summary="Debug information")
async def debug_info(service: DiagnosticsService = Depends(get_diagnostics_service)):
    return await service.debug_info()


@router.get("/connection-test", summary="Direct MongoDB connection test")
async def connection_test(service: DiagnosticsService = Depends(get_diagnostics_service)):
    status_code, body = await service.connection_test()
    return JSONResponse(status_code=status_code, content=body)

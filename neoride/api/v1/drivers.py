"""
Driver API Routes

Endpoints for driver operations, keyed by the external identity:
- POST /                 - Create driver
- GET /{external_id}     - Get driver
- PUT /{external_id}     - Update driver
- DELETE /{external_id}  - Delete driver
"""
from fastapi import APIRouter, Body, Depends, status
from typing import Any, Dict

from neoride.schemas.responses import MessageResponseSchema
from neoride.services.driver_service import DriverService, get_driver_service

router = APIRouter()


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create driver",
    description="Create a pending driver. externalId, email, fullName, phone, licenseNumber, vehicleModel and vehiclePlate are required."
)
async def create_driver(
    payload: Dict[str, Any] = Body(...),
    service: DriverService = Depends(get_driver_service)
):
    driver = await service.create(payload)
    return driver.to_response()


@router.get(
    "/{external_id}",
    summary="Get driver by external id"
)
async def get_driver(
    external_id: str,
    service: DriverService = Depends(get_driver_service)
):
    driver = await service.get(external_id)
    return driver.to_response()


@router.put(
    "/{external_id}",
    summary="Update driver",
    description="Overwrite the given fields and re-validate the whole document."
)
async def update_driver(
    external_id: str,
    payload: Dict[str, Any] = Body(...),
    service: DriverService = Depends(get_driver_service)
):
    driver = await service.update(external_id, payload)
    return driver.to_response()


@router.delete(
    "/{external_id}",
    response_model=MessageResponseSchema,
    summary="Delete driver"
)
async def delete_driver(
    external_id: str,
    service: DriverService = Depends(get_driver_service)
):
    await service.delete(external_id)
    return MessageResponseSchema(message="Driver deleted successfully")

"""
Driver Service - Business Logic Layer

Builds driver documents from sign-up payloads. A new driver is always
pending, offline and unavailable, with zeroed counters, a vehicle derived
from the free-text model string, a placeholder location and default
working hours, whatever the caller sent for those fields.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Mapping

from fastapi import Depends

from neoride.core.database import ConnectionManager
from neoride.core.dependencies import get_connection_manager
from neoride.models.driver import Driver, DriverStatus, GeoPoint, WorkingHours
from neoride.models.vehicle import Vehicle
from neoride.repositories.driver_repository import DriverRepository
from neoride.services.base import DocumentService
from neoride.utils.documents import (
    caller_fields,
    lower_if_str,
    require_fields,
    upper_if_str,
    validate_document,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = [
    "externalId",
    "email",
    "fullName",
    "phone",
    "licenseNumber",
    "vehicleModel",
    "vehiclePlate",
]


def build_driver(payload: Mapping[str, Any], now: datetime) -> Driver:
    require_fields(payload, REQUIRED_FIELDS)

    plate = upper_if_str(payload["vehiclePlate"])
    vehicle_model = payload["vehicleModel"]

    vehicle = None
    if isinstance(vehicle_model, str) and isinstance(plate, str):
        vehicle = Vehicle.from_model_string(vehicle_model, plate, now.year).model_dump()

    data = caller_fields(payload)
    data.update(
        email=lower_if_str(payload["email"]),
        vehiclePlate=plate,
        status=DriverStatus.PENDING.value,
        isAvailable=False,
        isOnline=False,
        rating=0,
        totalRides=0,
        totalEarnings=0,
        vehicle=vehicle,
        location=GeoPoint(lastUpdated=now).model_dump(),
        workingHours=WorkingHours.default().model_dump(),
        createdAt=now,
        updatedAt=now,
    )
    return validate_document(Driver, data)


class DriverService(DocumentService[Driver]):
    repository_class = DriverRepository
    model = Driver

    def build(self, payload: Mapping[str, Any], now: datetime) -> Driver:
        driver = build_driver(payload, now)
        if driver.vehicle is not None:
            logger.info(f"Derived vehicle '{driver.vehicle.display_name}' for driver {driver.externalId}")
        return driver

    def normalize(self, data: Dict[str, Any]) -> Dict[str, Any]:
        data["email"] = lower_if_str(data.get("email"))
        data["vehiclePlate"] = upper_if_str(data.get("vehiclePlate"))

        # Keep the embedded plate in step with the top-level one
        vehicle = data.get("vehicle")
        if isinstance(vehicle, dict) and isinstance(data["vehiclePlate"], str):
            data["vehicle"] = {**vehicle, "plateNumber": data["vehiclePlate"]}
        return data


def get_driver_service(
    connections: ConnectionManager = Depends(get_connection_manager),
) -> DriverService:
    """Get driver service instance"""
    return DriverService(connections)

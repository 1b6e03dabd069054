"""
Document models package.
Import all models here so callers can use `from neoride.models import ...`.
"""
from neoride.models.base import DocumentModel, EmbeddedModel
from neoride.models.customer import (
    Address,
    Customer,
    CustomerPreferences,
    CustomerRide,
    PaymentKind,
    PaymentMethod,
)
from neoride.models.vehicle import Vehicle, VehicleType
from neoride.models.driver import (
    Driver,
    DriverRide,
    DriverStatus,
    GeoPoint,
    Review,
    WorkingDay,
    WorkingHours,
)

__all__ = [
    "DocumentModel",
    "EmbeddedModel",
    "Address",
    "Customer",
    "CustomerPreferences",
    "CustomerRide",
    "PaymentKind",
    "PaymentMethod",
    "Vehicle",
    "VehicleType",
    "Driver",
    "DriverRide",
    "DriverStatus",
    "GeoPoint",
    "Review",
    "WorkingDay",
    "WorkingHours",
]

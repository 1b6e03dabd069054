from beanie import Document
from pydantic import Field
from datetime import datetime
from typing import List, Literal, Optional
import enum

import pymongo

from neoride.models.base import DocumentModel, EmbeddedModel, UniqueStr
from neoride.models.vehicle import Vehicle


class DriverStatus(str, enum.Enum):
    """Driver approval status. New drivers start as pending."""
    PENDING = "pending"
    APPROVED = "approved"
    SUSPENDED = "suspended"
    REJECTED = "rejected"


class GeoPoint(EmbeddedModel):
    """GeoJSON point, [longitude, latitude]. Indexed 2dsphere, never queried."""
    type: Literal["Point"] = "Point"
    coordinates: List[float] = Field(default_factory=lambda: [0.0, 0.0], min_length=2, max_length=2)
    address: Optional[str] = None
    lastUpdated: Optional[datetime] = None


class WorkingDay(EmbeddedModel):
    start: Optional[str] = None
    end: Optional[str] = None
    isWorking: bool = False


WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday")
WEEKEND = ("saturday", "sunday")


class WorkingHours(EmbeddedModel):
    monday: Optional[WorkingDay] = None
    tuesday: Optional[WorkingDay] = None
    wednesday: Optional[WorkingDay] = None
    thursday: Optional[WorkingDay] = None
    friday: Optional[WorkingDay] = None
    saturday: Optional[WorkingDay] = None
    sunday: Optional[WorkingDay] = None

    @classmethod
    def default(cls) -> "WorkingHours":
        """09:00-17:00 every day; working on weekdays only."""
        days = {day: WorkingDay(start="09:00", end="17:00", isWorking=True) for day in WEEKDAYS}
        days.update({day: WorkingDay(start="09:00", end="17:00", isWorking=False) for day in WEEKEND})
        return cls(**days)


class DriverRide(EmbeddedModel):
    rideId: Optional[str] = None
    customerId: Optional[str] = None
    date: Optional[datetime] = None
    earnings: Optional[float] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    feedback: Optional[str] = None


class Review(EmbeddedModel):
    customerId: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    comment: Optional[str] = None
    date: Optional[datetime] = None


class Driver(DocumentModel, Document):
    """
    Driver model.
    externalId, email, licenseNumber and vehiclePlate are each unique.
    """
    externalId: UniqueStr
    email: UniqueStr
    fullName: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    licenseNumber: UniqueStr
    vehicleModel: str = Field(..., min_length=1)
    vehiclePlate: UniqueStr
    profileImageUrl: Optional[str] = None
    vehicleImageUrl: Optional[str] = None

    status: DriverStatus = DriverStatus.PENDING
    isAvailable: bool = False
    isOnline: bool = False

    rating: float = Field(0, ge=0, le=5)
    totalRides: int = Field(0, ge=0)
    totalEarnings: float = Field(0, ge=0)

    vehicle: Optional[Vehicle] = None
    location: GeoPoint = Field(default_factory=GeoPoint)
    workingHours: Optional[WorkingHours] = None
    rideHistory: List[DriverRide] = Field(default_factory=list)
    reviews: List[Review] = Field(default_factory=list)

    class Settings:
        name = "drivers"
        keep_nulls = False
        indexes = [
            [("location", pymongo.GEOSPHERE)],
        ]

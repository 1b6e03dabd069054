from pydantic import Field
from typing import Optional
import enum

from neoride.models.base import EmbeddedModel


class VehicleType(str, enum.Enum):
    SEDAN = "sedan"
    SUV = "suv"
    HATCHBACK = "hatchback"
    LUXURY = "luxury"
    ECONOMY = "economy"


class Vehicle(EmbeddedModel):
    """
    Vehicle model.
    Embedded in a driver document, derived from the free-text model string
    the driver signs up with.
    """
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    color: Optional[str] = None
    plateNumber: Optional[str] = None
    type: VehicleType = VehicleType.SEDAN
    capacity: int = Field(4, ge=1)

    @classmethod
    def from_model_string(cls, vehicle_model: str, plate: str, year: int) -> "Vehicle":
        """
        Split "Toyota Camry Hybrid" into make "Toyota" and model "Camry Hybrid".
        Missing parts become "Unknown".
        """
        parts = vehicle_model.split()
        make = parts[0] if parts else "Unknown"
        model = " ".join(parts[1:]) or "Unknown"

        return cls(
            make=make,
            model=model,
            year=year,
            color="Unknown",
            plateNumber=plate,
            type=VehicleType.SEDAN,
            capacity=4,
        )

    @property
    def display_name(self):
        """Return formatted vehicle name."""
        parts = [str(self.year) if self.year else None, self.make, self.model]
        return " ".join(filter(None, parts))

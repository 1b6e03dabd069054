from beanie import Document
from pydantic import Field
from datetime import datetime
from typing import Any, List, Optional
import enum

from neoride.models.base import DocumentModel, EmbeddedModel, UniqueStr


class PaymentKind(str, enum.Enum):
    """Payment method kinds. Stored only, never charged."""
    CARD = "card"
    WALLET = "wallet"
    CASH = "cash"


class CustomerPreferences(EmbeddedModel):
    notifications: bool = True
    smsAlerts: bool = True
    emailUpdates: bool = True


class Address(EmbeddedModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipCode: Optional[str] = None
    country: Optional[str] = None


class PaymentMethod(EmbeddedModel):
    kind: PaymentKind
    isDefault: bool = False
    details: Optional[Any] = None


class CustomerRide(EmbeddedModel):
    """Denormalized copy of a ride, not a reference."""
    rideId: Optional[str] = None
    date: Optional[datetime] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    feedback: Optional[str] = None


class Customer(DocumentModel, Document):
    """
    Customer model.
    Represents riders. Looked up by externalId, the id issued by the
    outside identity provider.
    """
    externalId: UniqueStr
    email: UniqueStr
    fullName: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    profileImageUrl: Optional[str] = None

    isVerified: bool = False
    isActive: bool = True

    preferences: CustomerPreferences = Field(default_factory=CustomerPreferences)
    address: Optional[Address] = None
    paymentMethods: List[PaymentMethod] = Field(default_factory=list)
    rideHistory: List[CustomerRide] = Field(default_factory=list)

    totalRides: int = Field(0, ge=0)
    averageRating: float = Field(0, ge=0, le=5)

    class Settings:
        name = "customers"
        keep_nulls = False


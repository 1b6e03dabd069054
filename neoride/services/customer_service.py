"""
Customer Service - Business Logic Layer

Builds customer documents from sign-up payloads:
- required field check
- lowercase email
- server-owned defaults (preferences, counters) layered over caller input
"""
from datetime import datetime
from typing import Any, Dict, List, Mapping

from fastapi import Depends

from neoride.core.database import ConnectionManager
from neoride.core.dependencies import get_connection_manager
from neoride.models.customer import Customer, CustomerPreferences, PaymentKind
from neoride.repositories.customer_repository import CustomerRepository
from neoride.services.base import DocumentService
from neoride.utils.documents import caller_fields, lower_if_str, require_fields, validate_document

REQUIRED_FIELDS = ["externalId", "email", "fullName", "phone"]


def default_payment_methods() -> List[Dict[str, Any]]:
    return [{"kind": PaymentKind.CASH.value, "isDefault": True}]


def build_customer(payload: Mapping[str, Any], now: datetime) -> Customer:
    """
    Fully-populated customer from a create payload.

    Caller fields win, except email (lowercased), preferences and the
    ride counters, which are always server-set at creation.
    """
    require_fields(payload, REQUIRED_FIELDS)

    data = caller_fields(payload)
    if not data.get("paymentMethods"):
        data["paymentMethods"] = default_payment_methods()

    data.update(
        email=lower_if_str(payload["email"]),
        preferences=CustomerPreferences().model_dump(),
        totalRides=0,
        averageRating=0,
        createdAt=now,
        updatedAt=now,
    )
    return validate_document(Customer, data)


class CustomerService(DocumentService[Customer]):
    repository_class = CustomerRepository
    model = Customer

    def build(self, payload: Mapping[str, Any], now: datetime) -> Customer:
        return build_customer(payload, now)

    def normalize(self, data: Dict[str, Any]) -> Dict[str, Any]:
        data["email"] = lower_if_str(data.get("email"))
        return data


def get_customer_service(
    connections: ConnectionManager = Depends(get_connection_manager),
) -> CustomerService:
    """Get customer service instance"""
    return CustomerService(connections)

"""
Customer API Routes

Endpoints for customer operations, keyed by the external identity:
- POST /                 - Create customer
- GET /{external_id}     - Get customer
- PUT /{external_id}     - Update customer
- DELETE /{external_id}  - Delete customer
"""
from fastapi import APIRouter, Body, Depends, status
from typing import Any, Dict

from neoride.schemas.responses import MessageResponseSchema
from neoride.services.customer_service import CustomerService, get_customer_service

router = APIRouter()


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create customer",
    description="Create a customer from a sign-up payload. externalId, email, fullName and phone are required."
)
async def create_customer(
    payload: Dict[str, Any] = Body(...),
    service: CustomerService = Depends(get_customer_service)
):
    customer = await service.create(payload)
    return customer.to_response()


@router.get(
    "/{external_id}",
    summary="Get customer by external id"
)
async def get_customer(
    external_id: str,
    service: CustomerService = Depends(get_customer_service)
):
    customer = await service.get(external_id)
    return customer.to_response()


@router.put(
    "/{external_id}",
    summary="Update customer",
    description="Overwrite the given fields and re-validate the whole document."
)
async def update_customer(
    external_id: str,
    payload: Dict[str, Any] = Body(...),
    service: CustomerService = Depends(get_customer_service)
):
    customer = await service.update(external_id, payload)
    return customer.to_response()


@router.delete(
    "/{external_id}",
    response_model=MessageResponseSchema,
    summary="Delete customer"
)
async def delete_customer(
    external_id: str,
    service: CustomerService = Depends(get_customer_service)
):
    await service.delete(external_id)
    return MessageResponseSchema(message="Customer deleted successfully")

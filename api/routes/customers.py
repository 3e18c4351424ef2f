"""
Customer endpoints.

- POST /api/clientes - Register customer
- GET /api/clientes - List customers, newest first
- GET /api/clientes/{customer_id} - Get one customer
"""

from typing import Any

from fastapi import APIRouter, Body, Depends

from api.dependencies import get_customer_service
from api.schemas import CreatedResponse
from core.logging import get_logger
from services import CustomerService


logger = get_logger(__name__)
router = APIRouter(prefix="/api/clientes", tags=["Customers"])


@router.post("", response_model=CreatedResponse)
async def create_customer(
    fields: dict[str, Any] = Body(...),
    service: CustomerService = Depends(get_customer_service),
) -> CreatedResponse:
    """
    Register a customer.

    Any JSON object is accepted; the server adds ``registrationDate``.
    """
    customer_id = await service.create(fields)
    return CreatedResponse(id=customer_id)


@router.get("")
async def list_customers(
    service: CustomerService = Depends(get_customer_service),
) -> list[dict[str, Any]]:
    return await service.list_all()


@router.get("/{customer_id}")
async def get_customer(
    customer_id: str,
    service: CustomerService = Depends(get_customer_service),
) -> dict[str, Any]:
    return await service.get(customer_id)

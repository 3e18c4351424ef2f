"""
Order endpoints.

- POST /api/pedidos - Place order (status starts as "pending")
- GET /api/pedidos - List orders, newest first
- GET /api/pedidos/{order_id} - Get one order
- PUT /api/pedidos/{order_id}/status - Change status
"""

from typing import Any

from fastapi import APIRouter, Body, Depends

from api.dependencies import get_order_service
from api.schemas import CreatedResponse, OrderStatusUpdateRequest, SuccessResponse
from core.logging import get_logger
from services import OrderService


logger = get_logger(__name__)
router = APIRouter(prefix="/api/pedidos", tags=["Orders"])


@router.post("", response_model=CreatedResponse)
async def create_order(
    fields: dict[str, Any] = Body(...),
    service: OrderService = Depends(get_order_service),
) -> CreatedResponse:
    """
    Place an order.

    Any JSON object is accepted. ``status`` is always set to "pending"
    and ``orderDate`` to the server time.
    """
    order_id = await service.create(fields)
    return CreatedResponse(id=order_id)


@router.get("")
async def list_orders(
    service: OrderService = Depends(get_order_service),
) -> list[dict[str, Any]]:
    return await service.list_all()


@router.get("/{order_id}")
async def get_order(
    order_id: str,
    service: OrderService = Depends(get_order_service),
) -> dict[str, Any]:
    return await service.get(order_id)


@router.put("/{order_id}/status", response_model=SuccessResponse)
async def update_order_status(
    order_id: str,
    request: OrderStatusUpdateRequest,
    service: OrderService = Depends(get_order_service),
) -> SuccessResponse:
    await service.update_status(order_id, request.status)
    return SuccessResponse()

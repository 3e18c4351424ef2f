"""
Pydantic schemas for API request/response validation.
"""

from api.schemas.common import CreatedResponse, ErrorResponse, SuccessResponse
from api.schemas.order import OrderStatusUpdateRequest
from api.schemas.product import ProductUpdateRequest
from api.schemas.statistics import StatisticsResponse

__all__ = [
    "CreatedResponse",
    "ErrorResponse",
    "SuccessResponse",
    "OrderStatusUpdateRequest",
    "ProductUpdateRequest",
    "StatisticsResponse",
]

"""
Order request schemas.
"""

from pydantic import BaseModel, Field


class OrderStatusUpdateRequest(BaseModel):
    """Request body for changing an order's status."""

    status: str = Field(
        ...,
        min_length=1,
        description="New status; any non-empty string",
        examples=["shipped", "delivered", "cancelled"],
    )

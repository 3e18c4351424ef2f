"""
Statistics response schema.
"""

from pydantic import BaseModel, Field


class StatisticsResponse(BaseModel):
    """Aggregate figures over all orders, products and customers."""

    totalOrders: int = Field(..., description="Number of orders")
    totalSales: str = Field(
        ...,
        description="Sum of order totals, two decimal places",
        examples=["35.50"],
    )
    totalProducts: int = Field(..., description="Number of products")
    totalCustomers: int = Field(..., description="Number of customers")
    pendingOrders: int = Field(..., description="Orders whose status is 'pending'")

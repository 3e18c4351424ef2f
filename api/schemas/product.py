"""
Product request schemas.

Price and stock are accepted as raw JSON values and coerced by the
product service, so that malformed numbers get the service's messages.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ProductUpdateRequest(BaseModel):
    """Request body for overwriting a product's mutable fields."""

    name: Optional[str] = Field(
        default=None,
        description="Product name",
        examples=["Caneca de cerâmica"],
    )
    description: Optional[str] = Field(
        default=None,
        description="Product description",
    )
    price: Any = Field(
        default=None,
        description="Unit price; number or numeric string",
        examples=[19.99, "19.99"],
    )
    stock: Any = Field(
        default=None,
        description="Units in stock; integer or integer string",
        examples=[5, "5"],
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Caneca de cerâmica",
                    "description": "Caneca 350ml, esmalte fosco",
                    "price": 39.9,
                    "stock": 12,
                }
            ]
        }
    }

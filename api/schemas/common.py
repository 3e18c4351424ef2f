"""
Response envelopes shared by all endpoints.
"""

from pydantic import BaseModel, Field


class CreatedResponse(BaseModel):
    """Response after creating a record."""

    success: bool = Field(
        default=True,
        description="Always true for a successful write",
    )
    id: str = Field(
        ...,
        description="Store-generated identifier of the new record",
    )


class SuccessResponse(BaseModel):
    """Response for updates and deletes."""

    success: bool = True


class ErrorResponse(BaseModel):
    """Body of every error response."""

    success: bool = False
    error: str = Field(
        ...,
        description="Human-readable error message",
        examples=["price must be a number, got 'abc'"],
    )

"""
Application error taxonomy.

Each error carries the HTTP status the API layer maps it to, so services
can raise without knowing about FastAPI.
"""


class AppError(Exception):
    """Base exception for application errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Client input could not be coerced to the expected type."""

    status_code = 400


class NotFoundError(AppError):
    """The referenced record does not exist."""

    status_code = 404


class StoreError(AppError):
    """The record store failed (network, auth, quota...)."""

    status_code = 500

"""Error taxonomy shared by the REST layer and the realtime gateway."""

from __future__ import annotations

from fastapi import status


class CareerConnectError(Exception):
    """Base class for errors that are reported back to the caller."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CareerConnectError):
    """Missing or malformed input; nothing has been written."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Missing required fields"


class AuthorizationError(CareerConnectError):
    """The acting user may not touch the addressed conversation or record."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFoundError(CareerConnectError):
    """The referenced record does not exist (for this owner)."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class StoreError(CareerConnectError):
    """The underlying persistence operation failed unexpectedly."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"


__all__ = [
    "CareerConnectError",
    "ValidationError",
    "AuthorizationError",
    "NotFoundError",
    "StoreError",
]

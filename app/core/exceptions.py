"""
Application error hierarchy.

Every error carries the HTTP status it maps to and a client-facing message.
Handlers in app.main render them as {"message": ...}.
"""
from fastapi import status


class CRMError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(CRMError):
    """No live session."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class Forbidden(CRMError):
    """Authenticated, but lacking a permission flag, role or company match."""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(CRMError):
    """Row absent, or owned by another company."""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ValidationError(CRMError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class StorageError(CRMError):
    """Underlying store failure. The original cause is logged, never returned."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Storage error"

"""
Domain errors raised by the lifecycle engines.

Each error carries the HTTP status it maps to at the API boundary.
"""
from typing import Optional

from fastapi import status


class PortalError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(PortalError):
    """No valid principal, or the principal has the wrong role."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class Forbidden(PortalError):
    """Right role, but no relationship to the target."""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(PortalError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ValidationError(PortalError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class InvalidTransition(ValidationError):
    """The requested state change is not allowed from the current state."""

    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move from {_name(current)} to {_name(requested)}")


class Conflict(PortalError):
    """A uniqueness constraint rejected the write."""
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class DuplicateApplication(Conflict):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "You have already applied for this internship"


class InternalError(PortalError):
    pass


def _name(value) -> str:
    return getattr(value, "value", value)

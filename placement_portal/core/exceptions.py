"""
Domain errors.

Services raise these; the FastAPI app maps them to HTTP responses of the
form {"detail": <message>, "kind": <kind>} (see main.py).
"""


class PortalError(Exception):
    """Base class for every failure reported to API callers."""

    kind = "internal"
    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class NotFoundError(PortalError):
    """Referenced job, application, profile or user does not exist."""

    kind = "not_found"
    status_code = 404


class ConflictError(PortalError):
    """Request clashes with current state (duplicate, closed, has applications)."""

    kind = "conflict"
    status_code = 409


class ForbiddenError(PortalError):
    """Actor lacks the role or does not own the resource."""

    kind = "forbidden"
    status_code = 403


class ValidationFailed(PortalError):
    """Malformed or out-of-range values, detected before any write."""

    kind = "validation"
    status_code = 422


class InternalError(PortalError):
    """Unexpected storage failure; message is kept opaque."""

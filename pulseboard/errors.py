"""Typed failures raised by services and rendered by the API layer.

Every server action either returns data or raises one of these. The
FastAPI exception handler in ``main.py`` turns them into
``{"success": false, "error": <message>}`` with the matching status code.
"""

from typing import Optional


class ServiceError(Exception):
    """Base class for expected, user-facing failures."""

    status_code: int = 400
    default_message: str = "Request failed"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotAuthenticatedError(ServiceError):
    status_code = 401
    default_message = "Not authenticated"


class NotAuthorizedError(ServiceError):
    status_code = 403
    default_message = "Not authorized"


class NotFoundError(ServiceError):
    status_code = 404
    default_message = "Not found"


class ValidationFailedError(ServiceError):
    status_code = 400
    default_message = "Invalid request"


class ConflictError(ServiceError):
    status_code = 409
    default_message = "Conflict"


class UpstreamError(ServiceError):
    """A third-party provider call failed."""

    status_code = 502
    default_message = "Upstream service error"

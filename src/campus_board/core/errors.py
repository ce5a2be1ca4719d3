"""Domain error taxonomy.

Services raise these; the HTTP layer maps each class onto a status code and a
``{"error": ..., "details": ...}`` body. Nothing here knows about FastAPI.
"""

from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base class for failures that are reported back to the caller."""

    status_code = 500
    default_message = "Request failed"

    def __init__(self, message: str | None = None, details: list[Any] | None = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class UnauthenticatedError(DomainError):
    """No actor could be resolved for the request."""

    status_code = 401
    default_message = "Authentication required"


class ForbiddenError(DomainError):
    """The actor is known but lacks the required role."""

    status_code = 403
    default_message = "Insufficient permission"


class ValidationFailedError(DomainError):
    """Malformed or out-of-bounds input."""

    status_code = 400
    default_message = "Invalid request data"


class NotFoundError(DomainError):
    """A referenced topic, comment, news item or profile does not exist."""

    status_code = 404
    default_message = "Not found"


class InvalidStateError(DomainError):
    """The requested transition is not legal from the entity's current state."""

    status_code = 409
    default_message = "Invalid state transition"


class StorageError(DomainError):
    """The data store rejected or failed a write.

    The message is deliberately generic; the underlying cause is logged where
    the error is raised.
    """

    status_code = 500
    default_message = "Internal server error"

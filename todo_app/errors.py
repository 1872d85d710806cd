"""
Error taxonomy for the todo service.

Every failure the core can report is a subclass of :class:`TodoAppError`.
Each class carries the HTTP status code and a machine-stable ``code``
string, so the API blueprint can render any of them with a single error
handler instead of building responses at every call site.
"""

from __future__ import annotations

from typing import Any


class TodoAppError(Exception):
    """
    Base class for all domain errors raised by the core.

    Attributes:
        message: Human-readable description, shown to the browser client.
        status_code: HTTP status used when the error reaches the boundary.
        code: Stable identifier clients can branch on.
    """

    status_code: int = 500
    code: str = "server_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.message}


class ValidationError(TodoAppError):
    """A required field is missing, blank, or of the wrong type."""

    status_code = 400
    code = "validation_error"


class ConflictError(TodoAppError):
    """A unique key (user email) is already taken."""

    # The browser client treats duplicates like any other bad registration.
    status_code = 400
    code = "conflict"


class NotFoundError(TodoAppError):
    """No matching record, or the record belongs to another user."""

    status_code = 404
    code = "not_found"


class AuthenticationError(TodoAppError):
    """Bad password, or a bearer token that resolves to no user."""

    status_code = 401
    code = "authentication_failed"


class StorageError(TodoAppError):
    """Reading, parsing or writing a backing collection failed."""

    status_code = 500
    code = "storage_error"

"""Error taxonomy shared by the data access layer and the route handlers.

Every error carries a user-facing message and the HTTP status it maps to.
The API layer renders them as ``{"message": ...}`` bodies.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import status

__all__ = [
    "FieldError",
    "InvalidInputError",
    "NotFoundError",
    "StoreUnavailableError",
    "TownsquareError",
    "UnauthorizedError",
    "UniqueConstraintViolationError",
]


@dataclass(frozen=True)
class FieldError:
    """A single validation failure tied to a payload field."""

    field: str
    message: str
    type: str

    def as_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message, "type": self.type}


class TownsquareError(Exception):
    """Base exception for all Townsquare failure modes."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_response(self) -> dict[str, object]:
        """Convert to the JSON error body."""
        return {"message": self.message}


class UnauthorizedError(TownsquareError):
    """No session, or a session that is invalid or expired."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class InvalidInputError(TownsquareError):
    """Payload failed schema validation; keeps field-level detail."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"

    def __init__(self, errors: list[FieldError], message: str | None = None) -> None:
        super().__init__(message)
        self.errors = errors

    def to_response(self) -> dict[str, object]:
        return {
            "message": self.message,
            "errors": [error.as_dict() for error in self.errors],
        }


class NotFoundError(TownsquareError):
    """Referenced id has no row."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"

    def __init__(self, resource_type: str, resource_id: object | None = None) -> None:
        super().__init__(f"{resource_type} not found")
        self.resource_type = resource_type
        self.resource_id = resource_id


class UniqueConstraintViolationError(TownsquareError):
    """Insert collided with a unique column (duplicate username)."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Unique constraint violated"

    def __init__(self, message: str | None = None, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field

    def to_response(self) -> dict[str, object]:
        body = super().to_response()
        if self.field is not None:
            body["errors"] = [FieldError(self.field, self.message, "unique").as_dict()]
        return body


class StoreUnavailableError(TownsquareError):
    """The relational store could not be reached; not retried."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Database unavailable"

    def __init__(self, operation: str, message: str | None = None) -> None:
        super().__init__(message)
        self.operation = operation

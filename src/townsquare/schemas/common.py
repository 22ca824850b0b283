"""Shared Pydantic schemas and payload validation helpers."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Annotated, Any, Generic, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from townsquare.core.errors import FieldError

ModelT = TypeVar("ModelT", bound=BaseModel)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; every stored timestamp is UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


UTCDateTime = Annotated[datetime, AfterValidator(_as_utc)]


class CamelModel(BaseModel):
    """Base for API models exchanged as camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class InsertModel(CamelModel):
    """Base for inbound insert payloads.

    Types are checked strictly and unknown keys are dropped, so server-assigned
    fields such as ``authorId`` never get through.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        strict=True,
        extra="ignore",
    )


class MessageResponse(BaseModel):
    """Plain ``{"message": ...}`` body used for errors and acknowledgements."""

    message: str


class FieldErrorResponse(BaseModel):
    field: str
    message: str
    type: str


class ValidationErrorResponse(MessageResponse):
    """Error body for payloads rejected by schema validation."""

    errors: list[FieldErrorResponse] = Field(default_factory=list)


@dataclass(frozen=True)
class Valid(Generic[ModelT]):
    """Payload that passed validation."""

    value: ModelT


@dataclass(frozen=True)
class Invalid:
    """Payload that failed validation, indexed by field."""

    errors: list[FieldError]


def field_errors(exc: ValidationError) -> list[FieldError]:
    """Flatten a pydantic ``ValidationError`` into field-indexed errors."""
    return [
        FieldError(
            field=".".join(str(loc) for loc in error["loc"]) or "body",
            message=error["msg"],
            type=error["type"],
        )
        for error in exc.errors()
    ]


def validate_payload(schema: type[ModelT], raw: Any) -> Valid[ModelT] | Invalid:
    """Validate ``raw`` against ``schema`` without raising.

    Returns:
        ``Valid`` carrying the typed payload, or ``Invalid`` with one entry per
        failing field.
    """
    try:
        return Valid(schema.model_validate(raw))
    except ValidationError as exc:
        return Invalid(field_errors(exc))

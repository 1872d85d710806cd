"""
Typed request contracts for every API operation.

Request bodies are validated against these pydantic models at the HTTP
boundary, before any core operation runs.  Unknown fields are ignored, so
clients cannot smuggle server-owned fields (``id``, ``user_id``, ``token``)
into a record.

Key Concepts Demonstrated:
- One schema per operation instead of ad hoc ``dict.get`` checks
- Strict types (a JSON ``"true"`` string is not a boolean)
- Partial-update payloads that remember which fields were supplied
- Translating pydantic errors into the service's ``ValidationError``
"""

from __future__ import annotations

from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr, field_validator

from .errors import ValidationError

Schema = TypeVar("Schema", bound=BaseModel)


def _require_text(value: str | None, field: str) -> str | None:
    if value is not None and not value.strip():
        raise ValueError(f"'{field}' is required")
    return value


class RequestSchema(BaseModel):
    """Base class for request bodies; unknown fields are dropped."""

    model_config = ConfigDict(extra="ignore")


class RegisterRequest(RequestSchema):
    """Body of ``POST /register``."""

    name: StrictStr
    email: StrictStr
    password: StrictStr

    @field_validator("name", "email", "password")
    @classmethod
    def _not_blank(cls, value: str, info: pydantic.ValidationInfo) -> str:
        return _require_text(value, info.field_name)


class LoginRequest(RequestSchema):
    """Body of ``POST /login``."""

    email: StrictStr
    password: StrictStr

    @field_validator("email", "password")
    @classmethod
    def _not_blank(cls, value: str, info: pydantic.ValidationInfo) -> str:
        return _require_text(value, info.field_name)


class TaskCreateRequest(RequestSchema):
    """Body of ``POST /todos``."""

    text: StrictStr

    @field_validator("text")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        return _require_text(value, "text")


class TaskUpdateRequest(RequestSchema):
    """
    Body of ``PUT /todos/<id>``.

    Both fields are optional.  A field that is absent, or sent as
    ``null``, leaves the stored value unchanged.
    """

    text: StrictStr | None = None
    completed: StrictBool | None = None

    @field_validator("text")
    @classmethod
    def _not_blank(cls, value: str | None) -> str | None:
        return _require_text(value, "text")

    def changes(self) -> dict[str, Any]:
        """Return only the fields the client supplied with a value."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


def _describe(exc: pydantic.ValidationError) -> str:
    """Turn the first pydantic error into a short client-facing message."""
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error.get("loc", ())) or "body"
    if error.get("type") == "missing":
        return f"'{field}' is required"
    if error.get("type") == "value_error":
        # Message comes from _require_text, prefixed by pydantic
        return str(error.get("ctx", {}).get("error", error.get("msg")))
    return f"'{field}': {error.get('msg')}"


def parse_request(schema: type[Schema], data: Any) -> Schema:
    """
    Validate a decoded JSON body against *schema*.

    Args:
        schema: The request model for the operation.
        data: The decoded JSON body (any JSON value).

    Returns:
        The validated request model.

    Raises:
        ValidationError: If the body is not a JSON object or fails the
            schema.
    """
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        return schema.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError(_describe(exc)) from exc

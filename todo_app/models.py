"""
Record models for the todo service.

Defines the two record types persisted by the service.  Both are pydantic
models: they are validated when loaded from the JSON collections (so a
hand-edited file with a missing field surfaces as a storage error rather
than a ``KeyError`` deep inside a request) and dumped back to plain dicts
for saving.

Key Concepts Demonstrated:
- Typed records on top of schemaless JSON storage
- Server-assigned identifiers (UUID4) via ``default_factory``
- Safe serialisation that excludes sensitive fields
"""

from __future__ import annotations

from typing import Any, TypeVar
from uuid import uuid4

import pydantic
from pydantic import AliasChoices, BaseModel, Field

from .errors import StorageError

RecordModel = TypeVar("RecordModel", bound=BaseModel)


def new_id() -> str:
    """Return a fresh opaque record identifier."""
    return str(uuid4())


def parse_record(model: type[RecordModel], record: dict[str, Any]) -> RecordModel:
    """
    Validate one stored record into *model*.

    Raises:
        StorageError: If the stored object does not match the model, e.g.
            a required field was removed by hand.
    """
    try:
        return model.model_validate(record)
    except pydantic.ValidationError as exc:
        raise StorageError(f"Malformed {model.__name__} record in storage") from exc


class User(BaseModel):
    """
    A registered user.

    Attributes:
        id: Opaque identifier assigned at registration, never changed.
        name: Display name returned to the client at login.
        email: Unique natural key used to log in.
        password_hash: Werkzeug hash of the password; the plaintext is
            never stored.  Read from ``password`` in older files, which
            hold an unsalted SHA-256 hex digest instead.
        token: Current bearer token, or ``None`` before the first login.
            Each login overwrites it, which implicitly revokes the
            previous one.
    """

    id: str = Field(default_factory=new_id)
    name: str
    email: str
    password_hash: str = Field(validation_alias=AliasChoices("password_hash", "password"))
    token: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """
        Return a client-safe dictionary representation.

        ``password_hash`` and ``token`` are intentionally excluded.
        """
        return {"id": self.id, "name": self.name, "email": self.email}

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.email}>"


class Task(BaseModel):
    """
    A to-do item owned by exactly one user.

    Attributes:
        id: Opaque identifier assigned at creation.
        user_id: ``id`` of the owning user.  Every read and write is
            filtered on this value.  Older files call it ``userId``.
        text: What needs doing.
        completed: Whether the item is done.
    """

    id: str = Field(default_factory=new_id)
    user_id: str = Field(validation_alias=AliasChoices("user_id", "userId"))
    text: str
    completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialise the task to a JSON-safe dictionary."""
        return self.model_dump()

    def __repr__(self) -> str:
        return f"<Task {self.id}: {self.text}>"

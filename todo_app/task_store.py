"""
Ownership-scoped CRUD over the ``todos`` collection.

Every operation takes the id of an already-authenticated owner and only
ever matches tasks whose ``user_id`` equals it.  A task that exists but
belongs to someone else is reported exactly like a task that does not
exist, so callers cannot probe for other users' ids.
"""

from __future__ import annotations

import logging
from typing import Any

from .errors import NotFoundError, ValidationError
from .models import Task, parse_record
from .record_store import Record, RecordStore

logger = logging.getLogger(__name__)

TASKS_COLLECTION = "todos"

# Sentinel for "field not supplied" in partial updates
UNSET: Any = object()


def _owner_of(record: Record) -> Any:
    # older files store the owner under "userId"
    return record.get("user_id", record.get("userId"))


def _owned_index(records: list[Record], owner_id: str, task_id: str) -> int:
    """Return the position of *task_id* owned by *owner_id*, or raise."""
    for i, record in enumerate(records):
        if record.get("id") == task_id and _owner_of(record) == owner_id:
            return i
    raise NotFoundError("Todo not found")


class TaskStore:
    """CRUD over tasks, always filtered by owner."""

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    def list(self, owner_id: str) -> list[Task]:
        """Return the owner's tasks in insertion order."""
        return [
            parse_record(Task, record)
            for record in self._store.load(TASKS_COLLECTION)
            if _owner_of(record) == owner_id
        ]

    def get(self, owner_id: str, task_id: str) -> Task:
        """
        Return one of the owner's tasks.

        Raises:
            NotFoundError: If the task does not exist or is not owned by
                *owner_id*.
        """
        records = self._store.load(TASKS_COLLECTION)
        return parse_record(Task, records[_owned_index(records, owner_id, task_id)])

    def create(self, owner_id: str, text: str) -> Task:
        """
        Add a new, not yet completed task for the owner.

        Raises:
            ValidationError: If *text* is empty or whitespace-only.
        """
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Todo text is required")

        task = Task(user_id=owner_id, text=text)
        with self._store.transaction(TASKS_COLLECTION) as records:
            records.append(task.model_dump())

        logger.info("Created todo %s for user %s", task.id, owner_id)
        return task

    def update(
        self,
        owner_id: str,
        task_id: str,
        text: str = UNSET,
        completed: bool = UNSET,
    ) -> Task:
        """
        Change the supplied fields of one of the owner's tasks.

        Fields left as ``UNSET`` keep their stored value.

        Raises:
            NotFoundError: Same ownership rule as :meth:`get`.
            ValidationError: If a supplied ``text`` is blank or a supplied
                ``completed`` is not a boolean.
        """
        if text is not UNSET and (not isinstance(text, str) or not text.strip()):
            raise ValidationError("Todo text cannot be empty")
        if completed is not UNSET and not isinstance(completed, bool):
            raise ValidationError("'completed' must be a boolean")

        with self._store.transaction(TASKS_COLLECTION) as records:
            index = _owned_index(records, owner_id, task_id)
            task = parse_record(Task, records[index])
            if text is not UNSET:
                task.text = text
            if completed is not UNSET:
                task.completed = completed
            records[index] = task.model_dump()

        logger.info("Updated todo %s for user %s", task_id, owner_id)
        return task

    def delete(self, owner_id: str, task_id: str) -> None:
        """
        Remove one of the owner's tasks.

        Raises:
            NotFoundError: Same ownership rule as :meth:`get`.
        """
        with self._store.transaction(TASKS_COLLECTION) as records:
            del records[_owned_index(records, owner_id, task_id)]

        logger.info("Deleted todo %s for user %s", task_id, owner_id)

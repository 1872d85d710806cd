"""
JSON-file persistence for named record collections.

Each collection (``users``, ``todos``) lives in its own file under the
configured data directory and holds a top-level JSON array of objects.
Collections are always read in full and rewritten in full; there are no
partial updates.

Key Concepts Demonstrated:
- Lazy creation of the backing file on first access
- Atomic rewrite via a temporary file and ``os.replace``
- Per-collection re-entrant locks around load-mutate-save cycles
- Flask extension pattern (``init_app``) for binding to an application
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from flask import Flask

from .errors import StorageError

logger = logging.getLogger(__name__)

Record = dict[str, Any]

_COLLECTION_NAME = re.compile(r"^[A-Za-z0-9_-]+$")


class RecordStore:
    """
    Load and save named collections of JSON records.

    A collection that has never been read is created as an empty array
    the first time it is loaded, so the backing file always exists after
    first access.  Corrupt files are reported as :class:`StorageError`
    and left untouched for an operator to inspect.

    All mutations should go through :meth:`transaction`, which holds the
    collection's lock for the whole load-mutate-save cycle.  The locks
    only serialise threads inside this process.
    """

    def __init__(self, data_dir: str | Path | None = None) -> None:
        self._data_dir = Path(data_dir) if data_dir is not None else None
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def init_app(self, app: Flask) -> None:
        """Bind the store to ``app.config["DATA_DIR"]`` and register it."""
        self._data_dir = Path(app.config["DATA_DIR"])
        app.extensions["record_store"] = self
        logger.info("Record store using data directory %s", self._data_dir)

    @property
    def data_dir(self) -> Path:
        if self._data_dir is None:
            raise StorageError("Record store is not bound to a data directory")
        return self._data_dir

    def path_for(self, collection: str) -> Path:
        """Return the backing file of *collection*."""
        if not _COLLECTION_NAME.match(collection):
            raise StorageError(f"Invalid collection name: {collection!r}")
        return self.data_dir / f"{collection}.json"

    def lock(self, collection: str) -> threading.RLock:
        """Return the re-entrant lock guarding *collection*."""
        with self._locks_guard:
            lock = self._locks.get(collection)
            if lock is None:
                lock = self._locks[collection] = threading.RLock()
            return lock

    def load(self, collection: str) -> list[Record]:
        """
        Read every record of *collection*.

        Args:
            collection: Name of the collection, e.g. ``"users"``.

        Returns:
            The records in storage order.

        Raises:
            StorageError: If the file cannot be read, is not valid JSON,
                or is not a top-level array of objects.
        """
        path = self.path_for(collection)
        with self.lock(collection):
            try:
                with open(path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except FileNotFoundError:
                logger.info("Creating empty collection %s at %s", collection, path)
                self.save(collection, [])
                return []
            except json.JSONDecodeError as exc:
                raise StorageError(
                    f"Collection '{collection}' at {path} is not valid JSON"
                ) from exc
            except OSError as exc:
                raise StorageError(f"Failed to read collection '{collection}'") from exc

        if not isinstance(data, list):
            raise StorageError(f"Collection '{collection}' must contain a JSON array")
        if not all(isinstance(record, dict) for record in data):
            raise StorageError(f"Collection '{collection}' must contain only JSON objects")
        return data

    def save(self, collection: str, records: list[Record]) -> None:
        """
        Replace the whole content of *collection* with *records*.

        The JSON is written to a temporary file in the same directory and
        then moved over the target, so readers never see a half-written file.

        Raises:
            StorageError: If the directory or file cannot be written.
        """
        path = self.path_for(collection)
        with self.lock(collection):
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                with tempfile.NamedTemporaryFile(
                    mode="w",
                    dir=str(path.parent),
                    prefix=f".{collection}-",
                    suffix=".tmp",
                    delete=False,
                    encoding="utf-8",
                ) as tf:
                    json.dump(records, tf, indent=2, ensure_ascii=False)
                    temp_path = Path(tf.name)
            except OSError as exc:
                raise StorageError(f"Failed to write collection '{collection}'") from exc

            try:
                os.replace(temp_path, path)
            except OSError as exc:
                temp_path.unlink(missing_ok=True)
                raise StorageError(f"Failed to write collection '{collection}'") from exc

    @contextmanager
    def transaction(self, collection: str) -> Iterator[list[Record]]:
        """
        Hold *collection*'s lock across a load-mutate-save cycle.

        Yields the loaded list; the caller mutates it in place.  The list
        is saved when the block exits normally.  If the block raises, no
        save happens and the exception propagates.

        Example:
            with store.transaction("todos") as todos:
                todos.append(new_todo)
        """
        with self.lock(collection):
            records = self.load(collection)
            yield records
            self.save(collection, records)

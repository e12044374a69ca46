"""Storage backends for registry documents."""

import copy
import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from apkship.adapters.file_adapter import create_file_adapter
from apkship.core.errors import FileSystemError, RegistryError
from apkship.protocols import FileAdapterProtocol


logger = logging.getLogger(__name__)

_locks_guard = threading.Lock()
_file_locks: dict[Path, threading.RLock] = {}


def _lock_for(path: Path) -> threading.RLock:
    """One lock per registry file, shared by every store opened on it."""
    key = path.expanduser().absolute()
    with _locks_guard:
        lock = _file_locks.get(key)
        if lock is None:
            lock = threading.RLock()
            _file_locks[key] = lock
        return lock


class JsonFileStore:
    """Registry document persisted as a JSON file.

    A missing file is created holding ``default_document``. Saves replace the
    file atomically through the file adapter.
    """

    def __init__(
        self,
        path: Path,
        default_document: dict[str, Any],
        file_adapter: FileAdapterProtocol | None = None,
    ) -> None:
        self.path = path
        self.default_document = default_document
        self.file_adapter = file_adapter or create_file_adapter()
        self._lock = _lock_for(path)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            yield

    def _ensure_file(self) -> None:
        if not self.file_adapter.exists(self.path):
            logger.info("Creating registry file %s", self.path)
            self.file_adapter.write_json(
                self.path, copy.deepcopy(self.default_document)
            )

    def load(self) -> dict[str, Any]:
        with self._lock:
            self._ensure_file()
            try:
                return self.file_adapter.read_json(self.path)
            except FileSystemError as e:
                if e.operation == "read_json":
                    raise RegistryError(
                        f"Malformed registry file {self.path}: {e}",
                        context={"path": str(self.path)},
                    ) from e
                raise

    def save(self, data: dict[str, Any]) -> None:
        with self._lock:
            self.file_adapter.write_json(self.path, data)


class MemoryStore:
    """In-memory registry document, used by tests and embedding callers."""

    def __init__(self, document: dict[str, Any] | None = None) -> None:
        self._document: dict[str, Any] = copy.deepcopy(document or {})
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            yield

    def load(self) -> dict[str, Any]:
        with self._lock:
            return copy.deepcopy(self._document)

    def save(self, data: dict[str, Any]) -> None:
        with self._lock:
            self._document = copy.deepcopy(data)

"""Key-value store persisted as a single JSON document."""

import asyncio
import base64
import json
import logging
import os
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from filelock import FileLock, Timeout

from fieldsense.storage.errors import StorageError

logger = logging.getLogger(__name__)

_BYTES_MARKER = "__bytes__"


def _encode(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return {_BYTES_MARKER: base64.b64encode(bytes(value)).decode("ascii")}
    return value


def _decode(value: Any) -> Any:
    if isinstance(value, dict) and set(value) == {_BYTES_MARKER}:
        return base64.b64decode(value[_BYTES_MARKER])
    return value


class FileKeyValueStore:
    """All keys live in one JSON file; blobs are base64 encoded.

    Writes go to a temporary file that atomically replaces the document, so a
    failed write never leaves a truncated file behind.
    """

    def __init__(self, path: Path, lock_timeout: float = 10):
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock_path = path.with_name(path.name + ".lock")
        self._lock_timeout = lock_timeout

    @contextmanager
    def _locked(self) -> Iterator[None]:
        """Acquire file lock for concurrent access safety."""
        lock = FileLock(self._lock_path, timeout=self._lock_timeout)
        try:
            with lock:
                yield
        except Timeout as e:
            logger.warning("Failed to acquire lock for %s", self.path)
            raise StorageError(f"Timed out waiting for {self._lock_path}") from e

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read {self.path}: {e}") from e
        if not isinstance(document, dict):
            raise StorageError(f"Corrupt store document: {self.path}")
        return document

    def _write(self, document: dict[str, Any]) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(document, f)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            tmp_path.unlink(missing_ok=True)
            raise StorageError(f"Failed to write {self.path}: {e}") from e

    # Sync operations (run in a worker thread)

    def _get_sync(self, keys: Sequence[str]) -> dict[str, Any]:
        with self._locked():
            document = self._read()
        return {k: _decode(document[k]) for k in keys if k in document}

    def _set_sync(self, record: Mapping[str, Any]) -> None:
        with self._locked():
            document = self._read()
            document.update({k: _encode(v) for k, v in record.items()})
            self._write(document)

    def _remove_sync(self, keys: Sequence[str]) -> None:
        with self._locked():
            document = self._read()
            if not any(k in document for k in keys):
                return
            for key in keys:
                document.pop(key, None)
            self._write(document)

    async def get(self, keys: Sequence[str]) -> dict[str, Any]:
        return await asyncio.to_thread(self._get_sync, list(keys))

    async def set(self, record: Mapping[str, Any]) -> None:
        await asyncio.to_thread(self._set_sync, dict(record))

    async def remove(self, keys: Sequence[str]) -> None:
        await asyncio.to_thread(self._remove_sync, list(keys))

    async def close(self) -> None:
        return None

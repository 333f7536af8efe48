"""Key-value store port."""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Async key-value persistence.

    Values are JSON-compatible (dicts, lists, strings, numbers, booleans) or
    raw `bytes`. Backends raise `StorageError` on I/O failures.
    """

    async def get(self, keys: Sequence[str]) -> dict[str, Any]:
        """Return the stored values for the keys that exist."""
        ...

    async def set(self, record: Mapping[str, Any]) -> None:
        """Write all keys of the record at once."""
        ...

    async def remove(self, keys: Sequence[str]) -> None:
        """Delete the given keys; missing keys are ignored."""
        ...

    async def close(self) -> None:
        """Release backend resources."""
        ...

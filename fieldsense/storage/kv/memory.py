"""In-process key-value store (tests and the memory backend)."""

import copy
from collections.abc import Mapping, Sequence
from typing import Any


class MemoryKeyValueStore:
    """Dict-backed store. Values are deep-copied in and out."""

    def __init__(self, initial: Mapping[str, Any] | None = None):
        self._data: dict[str, Any] = copy.deepcopy(dict(initial or {}))

    def __len__(self) -> int:
        return len(self._data)

    async def get(self, keys: Sequence[str]) -> dict[str, Any]:
        return {k: copy.deepcopy(self._data[k]) for k in keys if k in self._data}

    async def set(self, record: Mapping[str, Any]) -> None:
        self._data.update(copy.deepcopy(dict(record)))

    async def remove(self, keys: Sequence[str]) -> None:
        for key in keys:
            self._data.pop(key, None)

    async def close(self) -> None:
        return None

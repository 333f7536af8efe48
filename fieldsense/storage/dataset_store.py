"""Runtime training dataset persisted in the key-value store."""

import logging
from collections.abc import Iterable
from typing import Any

from fieldsense.data_models import (
    DatasetEntry,
    DatasetSource,
    Difficulty,
    TrainingSample,
    now_ms,
)
from fieldsense.preprocessing import normalize_signals

from .kv import KeyValueStore

logger = logging.getLogger(__name__)

DATASET_KEY = "fieldsense.dataset"


class DatasetStore:
    """User-curated labeled samples, deduplicated by (signals, field type)."""

    def __init__(self, kv: KeyValueStore):
        self._kv = kv

    async def _load(self) -> list[DatasetEntry]:
        data = await self._kv.get([DATASET_KEY])
        return [DatasetEntry.model_validate(e) for e in data.get(DATASET_KEY) or []]

    async def _save(self, entries: list[DatasetEntry]) -> None:
        await self._kv.set({DATASET_KEY: [e.model_dump(mode="json") for e in entries]})

    async def get_entries(self) -> list[DatasetEntry]:
        """All entries, newest first."""
        entries = await self._load()
        return sorted(entries, key=lambda e: e.created_at, reverse=True)

    async def count(self) -> int:
        return len(await self._load())

    async def add_entry(
        self,
        signals: str,
        field_type: str,
        source: DatasetSource = "manual",
        difficulty: Difficulty = "easy",
    ) -> DatasetEntry:
        """Add a sample, or refresh the existing one with the same signals and type."""
        normalized = normalize_signals(signals)
        if not normalized:
            raise ValueError("signals must not be empty")

        entries = await self._load()
        for i, existing in enumerate(entries):
            if existing.dedup_key == (normalized, field_type):
                entry = existing.model_copy(
                    update={
                        "source": source,
                        "difficulty": difficulty,
                        "created_at": now_ms(),
                    }
                )
                entries[i] = entry
                break
        else:
            entry = DatasetEntry(
                signals=normalized,
                field_type=field_type,
                source=source,
                difficulty=difficulty,
            )
            entries.append(entry)

        await self._save(entries)
        return entry

    async def import_entries(
        self, raw_entries: Iterable[DatasetEntry | dict[str, Any]]
    ) -> int:
        """Bulk import, skipping samples already present. Returns the number added."""
        entries = await self._load()
        keys = {e.dedup_key for e in entries}

        added: list[DatasetEntry] = []
        for raw in raw_entries:
            data = raw.model_dump() if isinstance(raw, DatasetEntry) else dict(raw)
            normalized = normalize_signals(data.get("signals", ""))
            if not normalized:
                continue
            data["signals"] = normalized
            data.setdefault("source", "imported")
            data = {k: v for k, v in data.items() if v is not None}
            entry = DatasetEntry.model_validate(data)
            if entry.dedup_key in keys:
                continue
            keys.add(entry.dedup_key)
            added.append(entry)

        if added:
            await self._save(entries + added)
            logger.info(
                "Imported %d dataset entries (total=%d)",
                len(added),
                len(entries) + len(added),
            )
        return len(added)

    async def remove_entry(self, entry_id: str) -> bool:
        entries = await self._load()
        remaining = [e for e in entries if e.id != entry_id]
        if len(remaining) == len(entries):
            return False
        await self._save(remaining)
        return True

    async def clear(self) -> None:
        await self._kv.remove([DATASET_KEY])

    async def training_samples(self) -> list[TrainingSample]:
        entries = await self._load()
        return [
            TrainingSample(signals=e.signals, field_type=e.field_type) for e in entries
        ]

"""Continuous-learning store for field classifications.

Every correction (an assistant verdict, a user fix, a persisted rule) is kept
as a normalized signal -> field type entry. The soft-match engine vectorizes
these entries and checks them before asking the network.

Each operation reads the collection, computes the new one in memory and
replaces it with a single write: a failed write leaves the previous collection
intact. Concurrent writers are last-writer-wins.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from fieldsense.config.field_types import UNKNOWN
from fieldsense.data_models import (
    FieldRule,
    LearnedEntry,
    LearnedSource,
    RetrainDetail,
    RetrainResult,
    now_ms,
)
from fieldsense.preprocessing import build_signals_from_rule, normalize_signals

from .kv import KeyValueStore

if TYPE_CHECKING:
    from .dataset_store import DatasetStore

logger = logging.getLogger(__name__)

LEARNED_ENTRIES_KEY = "fieldsense.learned_entries"
MAX_LEARNED_ENTRIES = 500

# Rule generators that name a strategy rather than a concrete value generator
_NON_GENERATOR_VALUES = frozenset({"auto", "ai", "tensorflow"})


class LearningStore:
    """Capped, deduplicated collection of learned corrections."""

    def __init__(
        self,
        kv: KeyValueStore,
        max_entries: int = MAX_LEARNED_ENTRIES,
        dataset: DatasetStore | None = None,
        clock: Callable[[], int] = now_ms,
    ):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._kv = kv
        self._max_entries = max_entries
        self._dataset = dataset
        self._clock = clock

    @property
    def max_entries(self) -> int:
        return self._max_entries

    async def get_entries(self) -> list[LearnedEntry]:
        """All entries, oldest first."""
        data = await self._kv.get([LEARNED_ENTRIES_KEY])
        raw = data.get(LEARNED_ENTRIES_KEY) or []
        return [LearnedEntry.model_validate(e) for e in raw]

    async def count(self) -> int:
        return len(await self.get_entries())

    async def _save(self, entries: Sequence[LearnedEntry]) -> None:
        await self._kv.set(
            {LEARNED_ENTRIES_KEY: [e.model_dump(mode="json") for e in entries]}
        )

    def _upsert(
        self,
        entries: list[LearnedEntry],
        signals: str,
        field_type: str,
        generator_type: str | None,
        source: LearnedSource,
    ) -> tuple[list[LearnedEntry], LearnedEntry]:
        """Insert or refresh one entry; a refreshed entry moves to the end."""
        now = self._clock()
        previous = next((e for e in entries if e.signals == signals), None)
        timestamp = max(now, previous.timestamp) if previous else now

        entry = LearnedEntry(
            signals=signals,
            field_type=field_type,
            generator_type=generator_type,
            source=source,
            timestamp=timestamp,
        )
        updated = [e for e in entries if e.signals != signals]
        updated.append(entry)
        return updated, entry

    def _evict(self, entries: list[LearnedEntry]) -> list[LearnedEntry]:
        """Drop the oldest timestamps until the collection fits the cap."""
        overflow = len(entries) - self._max_entries
        if overflow <= 0:
            return entries
        # Stable sort: among equal timestamps, later positions are more recent
        order = sorted(range(len(entries)), key=lambda i: entries[i].timestamp)
        dropped = set(order[:overflow])
        logger.debug(
            "Evicting %d learned entries (cap=%d)", overflow, self._max_entries
        )
        return [e for i, e in enumerate(entries) if i not in dropped]

    async def store(
        self,
        signals_raw: str,
        field_type: str,
        generator_type: str | None = None,
        source: LearnedSource = "auto",
    ) -> LearnedEntry | None:
        """Persist a signal -> type correction.

        Returns the stored entry, or None when the signals normalize to nothing.
        """
        signals = normalize_signals(signals_raw)
        if not signals:
            return None

        entries = await self.get_entries()
        entries, entry = self._upsert(
            entries, signals, field_type, generator_type, source
        )
        await self._save(self._evict(entries))

        logger.debug("Learned %r -> %s (source=%s)", signals, field_type, source)
        return entry

    async def remove(self, signals_raw: str) -> bool:
        """Delete the entry for these signals. Returns whether one was removed."""
        signals = normalize_signals(signals_raw)
        if not signals:
            return False

        entries = await self.get_entries()
        remaining = [e for e in entries if e.signals != signals]
        if len(remaining) == len(entries):
            return False

        await self._save(remaining)
        return True

    async def clear_all(self) -> None:
        await self._kv.remove([LEARNED_ENTRIES_KEY])
        logger.info("Cleared all learned entries")

    async def clear_rule_derived(self) -> int:
        """Delete entries derived from rules, keeping every other source.

        Returns the number of entries removed.
        """
        entries = await self.get_entries()
        remaining = [e for e in entries if e.source != "rule"]
        removed = len(entries) - len(remaining)
        if removed:
            await self._save(remaining)
        return removed

    async def retrain_from_rules(self, rules: Sequence[FieldRule]) -> RetrainResult:
        """Rebuild rule-derived entries from the given rules.

        Previous rule-derived entries are cleared first, so repeated retrains do
        not accumulate duplicates. Imported samples are also registered in the
        training dataset when one is attached.
        """
        start = time.perf_counter()

        entries = [e for e in await self.get_entries() if e.source != "rule"]

        details: list[RetrainDetail] = []
        imported: list[tuple[str, str]] = []

        for rule in rules:
            signals = build_signals_from_rule(rule)
            usable = bool(signals) and rule.field_type != UNKNOWN
            status = "imported" if usable else "skipped"
            details.append(
                RetrainDetail(
                    rule_id=rule.id,
                    status=status,
                    signals=signals,
                    field_type=rule.field_type,
                    selector=rule.field_selector,
                )
            )
            if status == "skipped":
                continue

            generator = (
                None if rule.generator in _NON_GENERATOR_VALUES else rule.generator
            )
            entries, _ = self._upsert(
                entries, signals, rule.field_type, generator, "rule"
            )
            imported.append((signals, rule.field_type))

        await self._save(self._evict(entries))

        if self._dataset is not None and imported:
            await self._dataset.import_entries(
                {"signals": s, "field_type": t, "source": "imported"}
                for s, t in imported
            )

        duration_ms = (time.perf_counter() - start) * 1000
        result = RetrainResult(
            total_rules=len(rules),
            imported=len(imported),
            skipped=len(rules) - len(imported),
            duration_ms=duration_ms,
            details=details,
        )
        logger.info(
            "Retrained from rules: %d imported, %d skipped (%.1fms)",
            result.imported,
            result.skipped,
            duration_ms,
        )
        return result

"""Soft-match classifier engine.

Holds the trained network, its vocabulary and labels, plus a cache of learned
correction vectors. Classification tries two tiers:

1. Learned vectors: nearest neighbour by cosine similarity. Corrections are
   trusted, so a match at or above `learned_threshold` wins outright.
2. Network: argmax of the softmax output, accepted at or above the lower
   `network_threshold`.

Anything below both thresholds returns None so later strategies can answer.
"""

from __future__ import annotations

import asyncio
import logging
import pickle
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from fieldsense.models import FieldNetwork
from fieldsense.preprocessing import (
    Vocabulary,
    is_zero_vector,
    normalize_signals,
    vectorize,
)
from fieldsense.storage import StorageError

from .result import SoftMatch

if TYPE_CHECKING:
    from fieldsense.storage import LearningStore, ModelStore

logger = logging.getLogger(__name__)

DEFAULT_LEARNED_THRESHOLD = 0.5
DEFAULT_NETWORK_THRESHOLD = 0.2


class SoftMatchEngine:
    """Explicit, shareable classifier state.

    Usage:
        engine = SoftMatchEngine(model_store, learning_store)
        await engine.load()
        match = engine.classify_by_soft_match("cpf numero")

    The loaded network, vocabulary and labels are read-only, so concurrent
    classifications need no locking.
    """

    def __init__(
        self,
        model_store: ModelStore,
        learning_store: LearningStore,
        learned_threshold: float = DEFAULT_LEARNED_THRESHOLD,
        network_threshold: float = DEFAULT_NETWORK_THRESHOLD,
    ):
        self._model_store = model_store
        self._learning_store = learning_store
        self.learned_threshold = learned_threshold
        self.network_threshold = network_threshold

        self._network: FieldNetwork | None = None
        self._vocab: Vocabulary = {}
        self._labels: list[str] = []

        self._learned_vectors: NDArray[np.float32] = np.empty((0, 0), dtype=np.float32)
        self._learned_types: list[str] = []
        self._learned_stale = True
        # Bumped by invalidate(); a load only installs vectors read at the
        # current generation
        self._learned_generation = 0

        # Set after a load finds no usable artifact; cleared by reload/dispose
        self._artifact_missing = False
        self._warned_unloaded = False

        self._lock = asyncio.Lock()
        self._background: set[asyncio.Task[None]] = set()

    @property
    def is_loaded(self) -> bool:
        return self._network is not None

    @property
    def labels(self) -> list[str]:
        return list(self._labels)

    @property
    def vocab_size(self) -> int:
        return len(self._vocab)

    @property
    def learned_count(self) -> int:
        return len(self._learned_types)

    # Lifecycle

    async def load(self) -> None:
        """Load the artifact and learned vectors if not loaded yet.

        Idempotent; concurrent callers wait on the same load.
        """
        if self.is_loaded and not self._learned_stale:
            return

        async with self._lock:
            if not self.is_loaded and not self._artifact_missing:
                await self._load_model()
            if self.is_loaded and self._learned_stale:
                await self._load_learned()

    async def _load_model(self) -> None:
        artifact = await self._model_store.load()
        if artifact is None:
            logger.info("No trained model available; soft matching disabled")
            self._artifact_missing = True
            return

        try:
            network = FieldNetwork.restore(artifact.topology, artifact.weights)
        except (ValueError, KeyError, RuntimeError, EOFError, pickle.PickleError) as e:
            logger.warning("Failed to restore trained model: %s", e)
            self._artifact_missing = True
            return

        if network.num_classes != len(artifact.labels):
            logger.warning(
                "Model output width %d does not match %d labels",
                network.num_classes,
                len(artifact.labels),
            )
            self._artifact_missing = True
            return

        self._network = network
        self._vocab = dict(artifact.vocabulary)
        self._labels = list(artifact.labels)
        self._learned_stale = True
        self._warned_unloaded = False
        logger.info(
            "Soft-match model loaded: vocab=%d, labels=%d, trained_at=%s",
            len(self._vocab),
            len(self._labels),
            artifact.meta.trained_at,
        )

    async def _load_learned(self) -> None:
        while True:
            generation = self._learned_generation
            entries = await self._learning_store.get_entries()
            if generation == self._learned_generation:
                break
            logger.debug("Learned entries changed during load; reading again")

        vectors: list[NDArray[np.float32]] = []
        types: list[str] = []
        for entry in entries:
            vec = vectorize(entry.signals, self._vocab)
            if is_zero_vector(vec):
                continue
            vectors.append(vec)
            types.append(entry.field_type)

        if vectors:
            self._learned_vectors = np.vstack(vectors)
        else:
            self._learned_vectors = np.empty((0, len(self._vocab)), dtype=np.float32)
        self._learned_types = types
        self._learned_stale = False

        logger.debug(
            "Learned vectors: %d/%d entries usable", len(types), len(entries)
        )

    def invalidate(self) -> None:
        """Drop learned vectors and rebuild them in the background.

        Without a running event loop the rebuild happens on the next `load()`.
        """
        self._learned_generation += 1
        self._learned_vectors = np.empty((0, len(self._vocab)), dtype=np.float32)
        self._learned_types = []
        self._learned_stale = True

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return

        task = loop.create_task(self._refresh_learned())
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _refresh_learned(self) -> None:
        try:
            await self.load()
        except StorageError as e:
            logger.warning("Failed to reload learned vectors: %s", e)

    async def reload(self) -> None:
        """Drop everything and load again (after retraining)."""
        self.dispose()
        await self.load()

    def dispose(self) -> None:
        """Release the network and caches."""
        for task in list(self._background):
            task.cancel()
        self._background.clear()

        self._network = None
        self._vocab = {}
        self._labels = []
        self._learned_vectors = np.empty((0, 0), dtype=np.float32)
        self._learned_types = []
        self._learned_stale = True
        self._artifact_missing = False

    # Classification

    def classify_by_soft_match(self, signals: str) -> SoftMatch | None:
        normalized = normalize_signals(signals)
        if not normalized:
            return None

        network = self._network
        if network is None:
            if not self._warned_unloaded:
                logger.warning("Soft-match engine not loaded; skipping")
                self._warned_unloaded = True
            return None

        vec = vectorize(normalized, self._vocab)
        if is_zero_vector(vec):
            return None

        # Tier 1: learned vectors
        learned_vectors = self._learned_vectors
        learned_types = self._learned_types
        if learned_types and learned_vectors.shape[1] == vec.shape[0]:
            scores = learned_vectors @ vec
            best = int(np.argmax(scores))
            score = float(scores[best])
            if score >= self.learned_threshold:
                return SoftMatch(
                    field_type=learned_types[best], confidence=score, tier="learned"
                )

        # Tier 2: network
        probs = network.predict_proba(vec)[0]
        best = int(np.argmax(probs))
        score = float(probs[best])
        if score >= self.network_threshold:
            return SoftMatch(
                field_type=self._labels[best], confidence=score, tier="network"
            )
        return None

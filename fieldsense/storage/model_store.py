"""Trained model artifact persistence."""

import logging

from pydantic import ValidationError

from fieldsense.data_models import TrainingArtifact, TrainingMeta

from .kv import KeyValueStore

logger = logging.getLogger(__name__)

MODEL_TOPOLOGY_KEY = "fieldsense.model.topology"
MODEL_WEIGHTS_KEY = "fieldsense.model.weights"
MODEL_VOCABULARY_KEY = "fieldsense.model.vocabulary"
MODEL_LABELS_KEY = "fieldsense.model.labels"
MODEL_META_KEY = "fieldsense.model.meta"

MODEL_KEYS = [
    MODEL_TOPOLOGY_KEY,
    MODEL_WEIGHTS_KEY,
    MODEL_VOCABULARY_KEY,
    MODEL_LABELS_KEY,
    MODEL_META_KEY,
]


class ModelStore:
    """Stores one trained artifact: topology, weights, vocabulary, labels, meta."""

    def __init__(self, kv: KeyValueStore):
        self._kv = kv

    async def save(self, artifact: TrainingArtifact) -> None:
        """Write every part of the artifact in a single call."""
        await self._kv.set(
            {
                MODEL_TOPOLOGY_KEY: artifact.topology,
                MODEL_WEIGHTS_KEY: artifact.weights,
                MODEL_VOCABULARY_KEY: artifact.vocabulary,
                MODEL_LABELS_KEY: artifact.labels,
                MODEL_META_KEY: artifact.meta.model_dump(mode="json"),
            }
        )
        logger.info(
            "Saved model artifact: vocab=%d, classes=%d",
            artifact.meta.vocab_size,
            artifact.meta.num_classes,
        )

    async def load(self) -> TrainingArtifact | None:
        """Load the artifact, or None when missing or incomplete."""
        data = await self._kv.get(MODEL_KEYS)
        missing = [k for k in MODEL_KEYS if k not in data]
        if missing:
            if len(missing) < len(MODEL_KEYS):
                logger.warning("Incomplete model artifact, missing: %s", missing)
            return None

        try:
            return TrainingArtifact(
                topology=data[MODEL_TOPOLOGY_KEY],
                weights=data[MODEL_WEIGHTS_KEY],
                vocabulary=data[MODEL_VOCABULARY_KEY],
                labels=data[MODEL_LABELS_KEY],
                meta=data[MODEL_META_KEY],
            )
        except ValidationError as e:
            logger.warning("Invalid model artifact: %s", e)
            return None

    async def has_model(self) -> bool:
        data = await self._kv.get([MODEL_META_KEY, MODEL_WEIGHTS_KEY])
        return MODEL_META_KEY in data and MODEL_WEIGHTS_KEY in data

    async def get_meta(self) -> TrainingMeta | None:
        data = await self._kv.get([MODEL_META_KEY])
        raw = data.get(MODEL_META_KEY)
        if raw is None:
            return None
        try:
            return TrainingMeta.model_validate(raw)
        except ValidationError as e:
            logger.warning("Invalid model metadata: %s", e)
            return None

    async def get_labels(self) -> list[str]:
        data = await self._kv.get([MODEL_LABELS_KEY])
        return list(data.get(MODEL_LABELS_KEY) or [])

    async def delete_model(self) -> None:
        await self._kv.remove(MODEL_KEYS)
        logger.info("Deleted model artifact")

"""Store factory driven by settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .dataset_store import DatasetStore
from .kv import FileKeyValueStore, KeyValueStore, MemoryKeyValueStore
from .learning_store import LearningStore
from .model_store import ModelStore
from .sqlalchemy import SqlAlchemyKeyValueStore, create_engine

if TYPE_CHECKING:
    from fieldsense.config.settings import Settings

logger = logging.getLogger(__name__)

STORE_FILENAME = "fieldsense-store.json"


async def create_kv_store(settings: Settings) -> KeyValueStore:
    """Create the configured key-value backend, ready to use."""
    backend = settings.storage_backend

    if backend == "memory":
        return MemoryKeyValueStore()

    if backend == "file":
        path = settings.data_dir / STORE_FILENAME
        logger.info("Using file store: %s", path)
        return FileKeyValueStore(path)

    engine = create_engine(settings.database_url, echo=settings.database_echo)
    store = SqlAlchemyKeyValueStore(engine)
    await store.init_schema()
    logger.info("Using database store: %s", settings.database_url.split("@")[-1])
    return store


class StoreFactory:
    """Builds the stores sharing one key-value backend."""

    def __init__(self, kv: KeyValueStore, settings: Settings):
        self._kv = kv
        self._settings = settings
        self._dataset = DatasetStore(kv)

    @property
    def kv(self) -> KeyValueStore:
        return self._kv

    @property
    def dataset(self) -> DatasetStore:
        return self._dataset

    @property
    def learning(self) -> LearningStore:
        return LearningStore(
            self._kv,
            max_entries=self._settings.max_learned_entries,
            dataset=self._dataset,
        )

    @property
    def model(self) -> ModelStore:
        return ModelStore(self._kv)

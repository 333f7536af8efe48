"""Storage layer.

This module provides:
- `kv`: the key-value port with memory, file and database backends
- stores for learned entries, the training dataset and the model artifact

Note: Domain models are in `fieldsense.data_models`.
"""

from .dataset_store import DATASET_KEY, DatasetStore
from .errors import StorageError
from .factory import StoreFactory, create_kv_store
from .kv import (
    FileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
    SqlAlchemyKeyValueStore,
)
from .learning_store import LEARNED_ENTRIES_KEY, MAX_LEARNED_ENTRIES, LearningStore
from .model_store import MODEL_KEYS, ModelStore

__all__ = [
    # Errors
    "StorageError",
    # Key-value backends
    "FileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SqlAlchemyKeyValueStore",
    "create_kv_store",
    # Stores
    "DATASET_KEY",
    "DatasetStore",
    "LEARNED_ENTRIES_KEY",
    "LearningStore",
    "MAX_LEARNED_ENTRIES",
    "MODEL_KEYS",
    "ModelStore",
    "StoreFactory",
]

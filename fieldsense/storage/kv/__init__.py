"""Key-value store port and backends."""

from fieldsense.storage.sqlalchemy import SqlAlchemyKeyValueStore

from .file import FileKeyValueStore
from .memory import MemoryKeyValueStore
from .protocol import KeyValueStore

__all__ = [
    "FileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SqlAlchemyKeyValueStore",
]

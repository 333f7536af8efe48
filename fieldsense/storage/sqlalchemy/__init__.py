"""SQLAlchemy persistence layer."""

from .engine import create_engine, create_session_maker, init_database
from .kv_store import SqlAlchemyKeyValueStore
from .tables import Base, KeyValueTable

__all__ = [
    # Engine
    "create_engine",
    "create_session_maker",
    "init_database",
    # Tables
    "Base",
    "KeyValueTable",
    # Store
    "SqlAlchemyKeyValueStore",
]

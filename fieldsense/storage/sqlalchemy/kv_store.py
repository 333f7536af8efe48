"""Key-value store backed by a SQL table."""

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from fieldsense.storage.errors import StorageError

from .engine import create_session_maker, init_database
from .tables import KeyValueTable


class SqlAlchemyKeyValueStore:
    """Stores each key as a row of `kv_records`.

    All keys of one `set` call are written in a single transaction.
    """

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._session_maker = create_session_maker(engine)

    async def init_schema(self) -> None:
        try:
            await init_database(self._engine)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to initialize schema: {e}") from e

    async def get(self, keys: Sequence[str]) -> dict[str, Any]:
        if not keys:
            return {}
        stmt = select(KeyValueTable).where(KeyValueTable.key.in_(list(keys)))
        try:
            async with self._session_maker() as session:
                result = await session.execute(stmt)
                rows = result.scalars().all()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read keys {list(keys)}: {e}") from e

        return {
            row.key: row.blob if row.blob is not None else row.value for row in rows
        }

    async def set(self, record: Mapping[str, Any]) -> None:
        try:
            async with self._session_maker() as session:
                async with session.begin():
                    for key, value in record.items():
                        if isinstance(value, (bytes, bytearray)):
                            row = KeyValueTable(key=key, value=None, blob=bytes(value))
                        else:
                            row = KeyValueTable(key=key, value=value, blob=None)
                        await session.merge(row)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to write keys {list(record)}: {e}") from e

    async def remove(self, keys: Sequence[str]) -> None:
        if not keys:
            return
        stmt = delete(KeyValueTable).where(KeyValueTable.key.in_(list(keys)))
        try:
            async with self._session_maker() as session:
                async with session.begin():
                    await session.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to remove keys {list(keys)}: {e}") from e

    async def close(self) -> None:
        await self._engine.dispose()

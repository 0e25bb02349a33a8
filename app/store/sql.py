from datetime import datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.models.documents import KeyValueDocument
from app.pricing.errors import StoreReadError, StoreWriteError
from app.store.base import KeyValueStore


class SqlKeyValueStore(KeyValueStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def get(self, key: str) -> Any | None:
        try:
            async with self.session_factory() as db:
                row = await db.get(KeyValueDocument, key)
                return row.value if row else None
        except SQLAlchemyError as e:
            raise StoreReadError(f"Failed to read {key!r}: {e}") from e

    async def upsert(self, key: str, value: Any) -> None:
        now = datetime.utcnow()
        try:
            async with self.session_factory() as db:
                obj = await db.get(KeyValueDocument, key)
                if obj:
                    obj.value = value
                    obj.updated_at = now
                else:
                    db.add(KeyValueDocument(key=key, value=value, updated_at=now))
                await db.commit()
        except SQLAlchemyError as e:
            raise StoreWriteError(f"Failed to write {key!r}: {e}") from e

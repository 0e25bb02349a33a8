import abc
from typing import Any

from app.pricing.models import PriceDocument


class KeyValueStore(abc.ABC):
    """A named-key JSON store. ``upsert`` creates or replaces a key's value."""

    @abc.abstractmethod
    async def get(self, key: str) -> Any | None:
        ...

    @abc.abstractmethod
    async def upsert(self, key: str, value: Any) -> None:
        ...


class PriceHistoryStore:
    """
    Reads and writes the price document as one blob under a single key.

    Reads surface ``StoreReadError`` and writes surface ``StoreWriteError``.
    Deciding which of those are fatal, and how to treat a malformed blob, is
    up to the caller.
    """

    def __init__(self, kv: KeyValueStore, key: str) -> None:
        self.kv = kv
        self.key = key

    async def get(self) -> Any | None:
        return await self.kv.get(self.key)

    async def put(self, document: PriceDocument) -> None:
        await self.kv.upsert(self.key, document.model_dump(mode="json"))

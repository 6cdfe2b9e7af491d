"""Key-value store with per-key TTL, shared by sessions and rate limit counters."""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any

from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from soundmap.utils import Clock, now


class KeyValueUnavailableError(Exception):
    """Raised when the backing store cannot be reached."""


class KeyValueStore(ABC):
    async def on_start(self) -> None:
        """Prepare the store on application startup."""

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Return the value, or None when the key is missing or expired."""

    @abstractmethod
    async def put(self, key: str, value: bytes, ttl_seconds: int) -> None:
        """Write the value; it expires ttl_seconds from now."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove the key. Missing keys are not an error."""


class MongoKeyValueStore(KeyValueStore):
    """Entries live in one collection: {_id: key, value: bytes, expires_at: datetime}.

    MongoDB's TTL monitor removes expired documents lazily, so reads also filter on expires_at.
    """

    def __init__(self, collection: AsyncCollection[dict[str, Any]], clock: Clock = now) -> None:
        self._collection = collection
        self._clock = clock

    async def on_start(self) -> None:
        """Create TTL index on startup."""
        await self._collection.create_index([("expires_at", 1)], expireAfterSeconds=0)

    async def get(self, key: str) -> bytes | None:
        try:
            doc = await self._collection.find_one({"_id": key, "expires_at": {"$gt": self._clock()}})
        except PyMongoError as e:
            raise KeyValueUnavailableError(str(e)) from e
        if doc is None:
            return None
        return bytes(doc["value"])

    async def put(self, key: str, value: bytes, ttl_seconds: int) -> None:
        expires_at = self._clock() + timedelta(seconds=ttl_seconds)
        try:
            await self._collection.replace_one({"_id": key}, {"value": value, "expires_at": expires_at}, upsert=True)
        except PyMongoError as e:
            raise KeyValueUnavailableError(str(e)) from e

    async def delete(self, key: str) -> None:
        try:
            await self._collection.delete_one({"_id": key})
        except PyMongoError as e:
            raise KeyValueUnavailableError(str(e)) from e


class MemoryKeyValueStore(KeyValueStore):
    """In-process store for development and tests. Expired entries are dropped when read."""

    def __init__(self, clock: Clock = now) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[bytes, datetime]] = {}

    async def get(self, key: str) -> bytes | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def put(self, key: str, value: bytes, ttl_seconds: int) -> None:
        self._entries[key] = (value, self._clock() + timedelta(seconds=ttl_seconds))

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

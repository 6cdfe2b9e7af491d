from soundmap.core.store.base import DataStore
from soundmap.core.store.memory import MemoryDataStore
from soundmap.core.store.mongo import MongoDataStore

__all__ = ["DataStore", "MemoryDataStore", "MongoDataStore"]

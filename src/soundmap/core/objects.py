"""Object storage for uploaded audio clips."""

import asyncio
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel

DEFAULT_CONTENT_TYPE = "application/octet-stream"
CONTENT_TYPE_SUFFIX = ".content-type"


class ObjectStoreError(Exception):
    """Raised when an object cannot be written or read."""


class StoredObject(BaseModel):
    content: bytes
    content_type: str


class ObjectStore(ABC):
    @abstractmethod
    async def put(self, key: str, content: bytes, content_type: str) -> None:
        """Store content under key, keeping its content type."""

    @abstractmethod
    async def get(self, key: str) -> StoredObject | None:
        """Return the stored object, or None if the key does not exist."""


def get_object_file_path(base_path: str, key: str) -> Path:
    """Get absolute path to the file holding an object.

    Args:
        base_path: Base directory of the store
        key: Object key, slash-separated (e.g. "audio/123-abc.webm")

    Returns:
        Absolute path to object file

    Raises:
        ObjectStoreError: If the key would resolve outside base_path
    """
    base = Path(base_path).resolve()
    file_path = (base / key).resolve()
    if not file_path.is_relative_to(base) or file_path == base:
        raise ObjectStoreError(f"Invalid object key: {key!r}")
    return file_path


def write_object_file(base_path: str, key: str, content: bytes, content_type: str) -> Path:
    """Write object bytes and a content type sidecar file to disk.

    Returns:
        Absolute path to written file
    """
    file_path = get_object_file_path(base_path, key)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_bytes(content)
    file_path.with_name(file_path.name + CONTENT_TYPE_SUFFIX).write_text(content_type)
    return file_path


def read_object_file(base_path: str, key: str) -> StoredObject | None:
    file_path = get_object_file_path(base_path, key)
    if not file_path.is_file():
        return None
    sidecar = file_path.with_name(file_path.name + CONTENT_TYPE_SUFFIX)
    content_type = sidecar.read_text().strip() if sidecar.is_file() else DEFAULT_CONTENT_TYPE
    return StoredObject(content=file_path.read_bytes(), content_type=content_type or DEFAULT_CONTENT_TYPE)


class LocalObjectStore(ObjectStore):
    """Objects stored as files under a base directory."""

    def __init__(self, base_path: str) -> None:
        self._base_path = base_path

    async def put(self, key: str, content: bytes, content_type: str) -> None:
        try:
            await asyncio.to_thread(write_object_file, self._base_path, key, content, content_type)
        except OSError as e:
            raise ObjectStoreError(str(e)) from e

    async def get(self, key: str) -> StoredObject | None:
        try:
            return await asyncio.to_thread(read_object_file, self._base_path, key)
        except OSError as e:
            raise ObjectStoreError(str(e)) from e


class MemoryObjectStore(ObjectStore):
    """In-process store for development and tests."""

    def __init__(self) -> None:
        self._objects: dict[str, StoredObject] = {}

    async def put(self, key: str, content: bytes, content_type: str) -> None:
        self._objects[key] = StoredObject(content=content, content_type=content_type)

    async def get(self, key: str) -> StoredObject | None:
        return self._objects.get(key)

from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, cast
from urllib.parse import urlparse

import structlog
from pymongo import AsyncMongoClient

from soundmap.config import Config
from soundmap.core.kv import KeyValueStore, MemoryKeyValueStore, MongoKeyValueStore
from soundmap.core.objects import LocalObjectStore, MemoryObjectStore, ObjectStore
from soundmap.core.store import DataStore, MemoryDataStore, MongoDataStore
from soundmap.utils import Clock, now

if TYPE_CHECKING:
    from soundmap.core.modules.auth.service import AuthService
    from soundmap.core.modules.comment.service import CommentService
    from soundmap.core.modules.feed.service import FeedService
    from soundmap.core.modules.follow.service import FollowService
    from soundmap.core.modules.like.service import LikeService
    from soundmap.core.modules.post.service import PostService
    from soundmap.core.modules.profile.service import ProfileService
    from soundmap.core.modules.ratelimit.service import RateLimitService
    from soundmap.core.modules.session.service import SessionService
    from soundmap.core.modules.upload.service import UploadService
    from soundmap.core.modules.user.service import UserService

logger = structlog.get_logger(__name__)


class Service:
    """Base class for services. Backends are reached through the core."""

    def __init__(self) -> None:
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core

    @property
    def store(self) -> DataStore:
        return self.core.store


class Services:
    """Service registry that discovers and initializes services."""

    user: UserService
    session: SessionService
    ratelimit: RateLimitService
    auth: AuthService
    upload: UploadService
    post: PostService
    follow: FollowService
    like: LikeService
    comment: CommentService
    feed: FeedService
    profile: ProfileService

    def __init__(self) -> None:
        """Initialize all services using the service configuration."""
        self._services: list[Service] = []

        # Service configuration: (attribute_name, module_path, class_name)
        service_configs = [
            ("user", "soundmap.core.modules.user.service", "UserService"),
            ("session", "soundmap.core.modules.session.service", "SessionService"),
            ("ratelimit", "soundmap.core.modules.ratelimit.service", "RateLimitService"),
            ("auth", "soundmap.core.modules.auth.service", "AuthService"),
            ("upload", "soundmap.core.modules.upload.service", "UploadService"),
            ("post", "soundmap.core.modules.post.service", "PostService"),
            ("follow", "soundmap.core.modules.follow.service", "FollowService"),
            ("like", "soundmap.core.modules.like.service", "LikeService"),
            ("comment", "soundmap.core.modules.comment.service", "CommentService"),
            ("feed", "soundmap.core.modules.feed.service", "FeedService"),
            ("profile", "soundmap.core.modules.profile.service", "ProfileService"),
        ]

        # Dynamically import and instantiate services
        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class()
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        for service in reversed(self._services):
            await service.on_stop()


class Core:
    """Container providing config, clock, backends, and all service instances."""

    config: Config
    clock: Clock
    store: DataStore
    kv: KeyValueStore
    objects: ObjectStore
    services: Services

    def __init__(
        self,
        config: Config,
        store: DataStore,
        kv: KeyValueStore,
        objects: ObjectStore,
        clock: Clock = now,
    ) -> None:
        self.config = config
        self.clock = clock
        self.store = store
        self.kv = kv
        self.objects = objects
        self.services = Services()
        self.services.set_core(self)

    @classmethod
    def from_config(cls, config: Config) -> Core:
        """Build backends described by the config: MongoDB + local files, or in-process memory."""
        if config.uses_memory_backends:
            logger.warning("using_memory_backends", database_url=config.database_url)
            return cls(config, MemoryDataStore(), MemoryKeyValueStore(), MemoryObjectStore())

        mongo_client: AsyncMongoClient[dict[str, Any]] = AsyncMongoClient(
            config.database_url, uuidRepresentation="standard", tz_aware=True
        )
        database = mongo_client.get_database(urlparse(config.database_url).path[1:])
        return cls(
            config,
            store=MongoDataStore(mongo_client, database),
            kv=MongoKeyValueStore(database.get_collection("kv")),
            objects=LocalObjectStore(config.audio_path),
        )

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        """Prepare backends, then start all services."""
        await self.store.on_start()
        await self.kv.on_start()
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close the database connection on shutdown."""
        await self.services.stop_all()
        await self.store.close()

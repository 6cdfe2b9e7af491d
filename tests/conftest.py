"""Shared pytest fixtures."""

from datetime import UTC, datetime, timedelta

import pytest

from soundmap.config import Config
from soundmap.core.core import Core
from soundmap.core.kv import MemoryKeyValueStore
from soundmap.core.objects import MemoryObjectStore
from soundmap.core.store import MemoryDataStore

TEST_PASSWORD = "correct-horse"


class FakeClock:
    """Controllable replacement for soundmap.utils.now."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 5, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def config(tmp_path):
    return Config(
        database_url="memory://",
        audio_path=str(tmp_path / "audio"),
        cookie_secure=False,
        _env_file=None,
    )


@pytest.fixture
def core(config, clock):
    """Core wired to in-memory backends and the fake clock."""
    return Core(
        config,
        store=MemoryDataStore(),
        kv=MemoryKeyValueStore(clock),
        objects=MemoryObjectStore(),
        clock=clock,
    )


@pytest.fixture
def make_user(core):
    """Create a user directly through the user service."""

    async def _make_user(username: str, password: str = TEST_PASSWORD):
        return await core.services.user.create_user(f"{username}@example.com", username, password)

    return _make_user


@pytest.fixture
def make_post(core, clock):
    """Create a post, then move the clock forward so the next post is newer."""

    async def _make_post(author, title: str = "Birdsong", latitude=None, longitude=None):
        post = await core.services.post.create_post(
            author.id, title, "/audio/1714564800000-abcd1234.webm", latitude=latitude, longitude=longitude
        )
        clock.advance(seconds=1)
        return post

    return _make_post

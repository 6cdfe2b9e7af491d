"""Tests for the in-memory DataStore."""

from datetime import UTC, datetime, timedelta

import pytest

from soundmap.core.modules.follow.models import Follow
from soundmap.core.modules.like.models import Like
from soundmap.core.modules.post.models import Post
from soundmap.core.modules.user.models import User
from soundmap.core.store import MemoryDataStore
from soundmap.errors import ConflictError

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def _user(username: str) -> User:
    return User(email=f"{username}@example.com", username=username, password_hash="$2b$10$x")


def _post(author: User, minutes: int, latitude=None, longitude=None) -> Post:
    return Post(
        author_id=author.id,
        title=f"+{minutes}m",
        audio_url="/audio/1-abcd1234.webm",
        latitude=latitude,
        longitude=longitude,
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )


class TestUsers:
    """Tests for user records."""

    @pytest.mark.asyncio
    async def test_unique_email_and_username(self):
        store = MemoryDataStore()
        await store.create_user(_user("alice"))

        with pytest.raises(ConflictError):
            await store.create_user(_user("alice"))

    @pytest.mark.asyncio
    async def test_get_users_skips_unknown(self):
        store = MemoryDataStore()
        alice = await store.create_user(_user("alice"))
        ghost = _user("ghost")

        assert await store.get_users([alice.id, ghost.id]) == {alice.id: alice}


class TestEdges:
    """Tests for follow and like edges."""

    @pytest.mark.asyncio
    async def test_follow_edge_is_unique(self):
        store = MemoryDataStore()
        alice, bob = _user("alice"), _user("bob")

        await store.create_follow_edge(Follow(follower_id=alice.id, following_id=bob.id))
        await store.create_follow_edge(Follow(follower_id=alice.id, following_id=bob.id))

        assert await store.count_followers(bob.id) == 1
        assert await store.delete_follow_edge(alice.id, bob.id) is True
        assert await store.delete_follow_edge(alice.id, bob.id) is False

    @pytest.mark.asyncio
    async def test_like_edge_is_unique(self):
        store = MemoryDataStore()
        alice = _user("alice")
        post = _post(alice, 0)

        await store.create_like_edge(Like(user_id=alice.id, post_id=post.id))
        await store.create_like_edge(Like(user_id=alice.id, post_id=post.id))

        assert await store.count_likes(post.id) == 1


class TestPosts:
    """Tests for post queries."""

    @pytest.mark.asyncio
    async def test_author_set_query_newest_first_with_limit(self):
        store = MemoryDataStore()
        alice, bob, carol = _user("alice"), _user("bob"), _user("carol")
        for author, minutes in [(alice, 1), (bob, 2), (carol, 3), (alice, 4)]:
            await store.create_post(_post(author, minutes))

        posts = await store.find_posts_by_author_set({alice.id, bob.id}, 2)

        assert [p.title for p in posts] == ["+4m", "+2m"]

    @pytest.mark.asyncio
    async def test_located_posts(self):
        store = MemoryDataStore()
        alice = _user("alice")
        await store.create_post(_post(alice, 1, latitude=1.0, longitude=2.0))
        await store.create_post(_post(alice, 2))

        assert [p.title for p in await store.list_located_posts(10)] == ["+1m"]
        assert await store.count_posts(alice.id) == 2

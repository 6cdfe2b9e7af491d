from collections.abc import Iterable
from typing import TypeVar
from uuid import UUID

from soundmap.core.modules.comment.models import Comment
from soundmap.core.modules.follow.models import Follow
from soundmap.core.modules.like.models import Like
from soundmap.core.modules.post.models import Post
from soundmap.core.modules.user.models import User
from soundmap.core.store.base import DataStore
from soundmap.errors import ConflictError

T = TypeVar("T", Post, Comment)


def _newest_first(items: Iterable[T]) -> list[T]:
    # sorted() is stable, so equal timestamps keep insertion order
    return sorted(items, key=lambda item: item.created_at, reverse=True)


class MemoryDataStore(DataStore):
    """In-process DataStore for development and tests. Records are kept in insertion order."""

    def __init__(self) -> None:
        self._users: dict[UUID, User] = {}
        self._posts: dict[UUID, Post] = {}
        self._follows: dict[tuple[UUID, UUID], Follow] = {}
        self._likes: dict[tuple[UUID, UUID], Like] = {}
        self._comments: dict[UUID, Comment] = {}

    # === Users ===
    async def get_user(self, user_id: UUID) -> User | None:
        return self._users.get(user_id)

    async def get_users(self, user_ids: Iterable[UUID]) -> dict[UUID, User]:
        return {user_id: self._users[user_id] for user_id in set(user_ids) if user_id in self._users}

    async def find_user_by_email(self, email: str) -> User | None:
        return next((u for u in self._users.values() if u.email == email), None)

    async def find_user_by_username(self, username: str) -> User | None:
        return next((u for u in self._users.values() if u.username == username), None)

    async def create_user(self, user: User) -> User:
        if any(u.email == user.email or u.username == user.username for u in self._users.values()):
            raise ConflictError("Email or username is already registered")
        self._users[user.id] = user
        return user

    # === Follows ===
    async def find_follow_edge(self, follower_id: UUID, following_id: UUID) -> Follow | None:
        return self._follows.get((follower_id, following_id))

    async def create_follow_edge(self, follow: Follow) -> Follow:
        return self._follows.setdefault((follow.follower_id, follow.following_id), follow)

    async def delete_follow_edge(self, follower_id: UUID, following_id: UUID) -> bool:
        return self._follows.pop((follower_id, following_id), None) is not None

    async def list_following_ids(self, follower_id: UUID) -> list[UUID]:
        return [following_id for (f_id, following_id) in self._follows if f_id == follower_id]

    async def count_followers(self, user_id: UUID) -> int:
        return sum(1 for (_, following_id) in self._follows if following_id == user_id)

    async def count_following(self, user_id: UUID) -> int:
        return sum(1 for (follower_id, _) in self._follows if follower_id == user_id)

    # === Posts ===
    async def create_post(self, post: Post) -> Post:
        self._posts[post.id] = post
        return post

    async def get_post(self, post_id: UUID) -> Post | None:
        return self._posts.get(post_id)

    async def find_posts_by_author_set(self, author_ids: Iterable[UUID], limit: int) -> list[Post]:
        authors = set(author_ids)
        return _newest_first(p for p in self._posts.values() if p.author_id in authors)[:limit]

    async def list_posts_by_author(self, author_id: UUID) -> list[Post]:
        return _newest_first(p for p in self._posts.values() if p.author_id == author_id)

    async def list_located_posts(self, limit: int) -> list[Post]:
        return _newest_first(p for p in self._posts.values() if p.has_coordinates)[:limit]

    async def count_posts(self, author_id: UUID) -> int:
        return sum(1 for p in self._posts.values() if p.author_id == author_id)

    # === Likes ===
    async def find_like_edge(self, user_id: UUID, post_id: UUID) -> Like | None:
        return self._likes.get((user_id, post_id))

    async def create_like_edge(self, like: Like) -> Like:
        return self._likes.setdefault((like.user_id, like.post_id), like)

    async def delete_like_edge(self, user_id: UUID, post_id: UUID) -> bool:
        return self._likes.pop((user_id, post_id), None) is not None

    async def count_likes(self, post_id: UUID) -> int:
        return sum(1 for (_, p_id) in self._likes if p_id == post_id)

    # === Comments ===
    async def create_comment(self, comment: Comment) -> Comment:
        self._comments[comment.id] = comment
        return comment

    async def list_comments(self, post_id: UUID) -> list[Comment]:
        return _newest_first(c for c in self._comments.values() if c.post_id == post_id)

    async def count_comments(self, post_id: UUID) -> int:
        return sum(1 for c in self._comments.values() if c.post_id == post_id)

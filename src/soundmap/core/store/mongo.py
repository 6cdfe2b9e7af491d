from collections.abc import Iterable
from typing import Any
from uuid import UUID

import structlog
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from soundmap.core.modules.comment.models import Comment
from soundmap.core.modules.follow.models import Follow
from soundmap.core.modules.like.models import Like
from soundmap.core.modules.post.models import Post
from soundmap.core.modules.user.models import User
from soundmap.core.store.base import DataStore
from soundmap.errors import ConflictError

logger = structlog.get_logger(__name__)

NEWEST_FIRST = [("created_at", -1)]


class MongoDataStore(DataStore):
    """DataStore backed by one MongoDB database, one collection per entity."""

    def __init__(self, client: AsyncMongoClient[dict[str, Any]], database: AsyncDatabase[dict[str, Any]]) -> None:
        self._client = client
        self._users = database.get_collection("users")
        self._posts = database.get_collection("posts")
        self._follows = database.get_collection("follows")
        self._likes = database.get_collection("likes")
        self._comments = database.get_collection("comments")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._users.create_index([("email", 1)], unique=True)
        await self._users.create_index([("username", 1)], unique=True)
        await self._posts.create_index([("author_id", 1), ("created_at", -1)])
        await self._posts.create_index([("created_at", -1)])
        await self._follows.create_index([("follower_id", 1), ("following_id", 1)], unique=True)
        await self._follows.create_index([("following_id", 1)])
        await self._likes.create_index([("user_id", 1), ("post_id", 1)], unique=True)
        await self._likes.create_index([("post_id", 1)])
        await self._comments.create_index([("post_id", 1), ("created_at", -1)])
        logger.debug("mongo_store_started")

    async def close(self) -> None:
        await self._client.aclose()

    # === Users ===
    async def get_user(self, user_id: UUID) -> User | None:
        return User.from_mongo(await self._users.find_one({"_id": user_id}))

    async def get_users(self, user_ids: Iterable[UUID]) -> dict[UUID, User]:
        users = await User.list_cursor(self._users.find({"_id": {"$in": list(set(user_ids))}}))
        return {user.id: user for user in users}

    async def find_user_by_email(self, email: str) -> User | None:
        return User.from_mongo(await self._users.find_one({"email": email}))

    async def find_user_by_username(self, username: str) -> User | None:
        return User.from_mongo(await self._users.find_one({"username": username}))

    async def create_user(self, user: User) -> User:
        try:
            await self._users.insert_one(user.to_mongo())
        except DuplicateKeyError as e:
            raise ConflictError("Email or username is already registered") from e
        return user

    # === Follows ===
    async def find_follow_edge(self, follower_id: UUID, following_id: UUID) -> Follow | None:
        return Follow.from_mongo(await self._follows.find_one({"follower_id": follower_id, "following_id": following_id}))

    async def create_follow_edge(self, follow: Follow) -> Follow:
        # A concurrent toggle may have inserted the same pair already
        try:
            await self._follows.insert_one(follow.to_mongo())
        except DuplicateKeyError:
            logger.debug("follow_edge_exists", follower_id=follow.follower_id, following_id=follow.following_id)
        return follow

    async def delete_follow_edge(self, follower_id: UUID, following_id: UUID) -> bool:
        result = await self._follows.delete_one({"follower_id": follower_id, "following_id": following_id})
        return result.deleted_count > 0

    async def list_following_ids(self, follower_id: UUID) -> list[UUID]:
        cursor = self._follows.find({"follower_id": follower_id}, projection={"following_id": 1})
        return [doc["following_id"] async for doc in cursor]

    async def count_followers(self, user_id: UUID) -> int:
        return await self._follows.count_documents({"following_id": user_id})

    async def count_following(self, user_id: UUID) -> int:
        return await self._follows.count_documents({"follower_id": user_id})

    # === Posts ===
    async def create_post(self, post: Post) -> Post:
        await self._posts.insert_one(post.to_mongo())
        return post

    async def get_post(self, post_id: UUID) -> Post | None:
        return Post.from_mongo(await self._posts.find_one({"_id": post_id}))

    async def find_posts_by_author_set(self, author_ids: Iterable[UUID], limit: int) -> list[Post]:
        cursor = self._posts.find({"author_id": {"$in": list(set(author_ids))}}).sort(NEWEST_FIRST).limit(limit)
        return await Post.list_cursor(cursor)

    async def list_posts_by_author(self, author_id: UUID) -> list[Post]:
        return await Post.list_cursor(self._posts.find({"author_id": author_id}).sort(NEWEST_FIRST))

    async def list_located_posts(self, limit: int) -> list[Post]:
        query = {"latitude": {"$ne": None}, "longitude": {"$ne": None}}
        return await Post.list_cursor(self._posts.find(query).sort(NEWEST_FIRST).limit(limit))

    async def count_posts(self, author_id: UUID) -> int:
        return await self._posts.count_documents({"author_id": author_id})

    # === Likes ===
    async def find_like_edge(self, user_id: UUID, post_id: UUID) -> Like | None:
        return Like.from_mongo(await self._likes.find_one({"user_id": user_id, "post_id": post_id}))

    async def create_like_edge(self, like: Like) -> Like:
        try:
            await self._likes.insert_one(like.to_mongo())
        except DuplicateKeyError:
            logger.debug("like_edge_exists", user_id=like.user_id, post_id=like.post_id)
        return like

    async def delete_like_edge(self, user_id: UUID, post_id: UUID) -> bool:
        result = await self._likes.delete_one({"user_id": user_id, "post_id": post_id})
        return result.deleted_count > 0

    async def count_likes(self, post_id: UUID) -> int:
        return await self._likes.count_documents({"post_id": post_id})

    # === Comments ===
    async def create_comment(self, comment: Comment) -> Comment:
        await self._comments.insert_one(comment.to_mongo())
        return comment

    async def list_comments(self, post_id: UUID) -> list[Comment]:
        return await Comment.list_cursor(self._comments.find({"post_id": post_id}).sort(NEWEST_FIRST))

    async def count_comments(self, post_id: UUID) -> int:
        return await self._comments.count_documents({"post_id": post_id})

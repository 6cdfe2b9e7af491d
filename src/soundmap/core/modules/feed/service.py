from uuid import UUID

import structlog

from soundmap.core.core import Service
from soundmap.core.modules.post.models import Post, PostView

logger = structlog.get_logger(__name__)

DEFAULT_FEED_LIMIT = 50


def merge_feed_posts(posts: list[Post], limit: int) -> list[Post]:
    """Drop repeated post IDs, order newest first, and cut to limit.

    The sort is stable, so posts with equal timestamps keep their incoming order.
    """
    unique: dict[UUID, Post] = {}
    for post in posts:
        unique.setdefault(post.id, post)
    ordered = sorted(unique.values(), key=lambda post: post.created_at, reverse=True)
    return ordered[:limit]


class FeedService(Service):
    """Composes a user's timeline from their own posts and the posts of everyone they follow."""

    async def compose_feed(self, user_id: UUID, limit: int = DEFAULT_FEED_LIMIT) -> list[PostView]:
        """Get the timeline of a user.

        Args:
            user_id: Timeline owner
            limit: Maximum number of posts

        Returns:
            Posts authored by the user or their followees, newest first, with
            author summaries and counts computed at read time
        """
        if limit <= 0:
            return []

        following_ids = await self.core.services.follow.get_following_ids(user_id)
        author_ids = {*following_ids, user_id}

        posts = await self.store.find_posts_by_author_set(author_ids, limit)
        posts = merge_feed_posts([post for post in posts if post.author_id in author_ids], limit)

        logger.debug("feed_composed", user_id=user_id, authors=len(author_ids), posts=len(posts))
        return await self.core.services.post.to_views(posts)

import asyncio
from uuid import UUID

import structlog

from soundmap.core.core import Service
from soundmap.core.modules.comment.models import CommentView
from soundmap.core.modules.post.models import MapPost, Post, PostDetail, PostView
from soundmap.core.modules.post.validators import (
    MAX_DESCRIPTION_LENGTH,
    MAX_LOCATION_LENGTH,
    clean_optional_text,
    clean_title,
    validate_coordinates,
)
from soundmap.errors import NotFoundError

logger = structlog.get_logger(__name__)

MAP_POST_LIMIT = 500


class PostService(Service):
    """Creates posts and builds the post, map and list views."""

    async def create_post(
        self,
        author_id: UUID,
        title: str,
        audio_url: str,
        description: str | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
        location: str | None = None,
    ) -> Post:
        """Create a post for an uploaded clip."""
        validate_coordinates(latitude, longitude)
        post = Post(
            author_id=author_id,
            title=clean_title(title),
            description=clean_optional_text(description, "Description", MAX_DESCRIPTION_LENGTH),
            audio_url=audio_url,
            latitude=latitude,
            longitude=longitude,
            location=clean_optional_text(location, "Location", MAX_LOCATION_LENGTH),
            created_at=self.core.clock(),
        )
        await self.store.create_post(post)
        logger.info("post_created", post_id=post.id, author_id=author_id, located=post.has_coordinates)
        return post

    def validate_post_fields(
        self,
        title: str,
        description: str | None,
        latitude: float | None,
        longitude: float | None,
        location: str | None,
    ) -> None:
        """Run every check create_post applies to its fields, without creating anything.

        Raises:
            ValidationError: If the title is blank, a text field is too long, or the coordinates are invalid
        """
        clean_title(title)
        clean_optional_text(description, "Description", MAX_DESCRIPTION_LENGTH)
        clean_optional_text(location, "Location", MAX_LOCATION_LENGTH)
        validate_coordinates(latitude, longitude)

    async def get_post(self, post_id: UUID) -> Post:
        """Get post by ID."""
        post = await self.store.get_post(post_id)
        if post is None:
            raise NotFoundError(f"Post '{post_id}' not found")
        return post

    async def to_views(self, posts: list[Post]) -> list[PostView]:
        """Attach author summaries and live like/comment counts, keeping order.

        Posts whose author no longer exists are dropped.
        """
        authors = await self.core.services.user.get_author_summaries({post.author_id for post in posts})
        like_counts = await asyncio.gather(*(self.store.count_likes(post.id) for post in posts))
        comment_counts = await asyncio.gather(*(self.store.count_comments(post.id) for post in posts))

        views = []
        for post, likes, comments in zip(posts, like_counts, comment_counts, strict=True):
            author = authors.get(post.author_id)
            if author is None:
                continue
            views.append(PostView.from_domain(post, author, likes, comments))
        return views

    async def get_post_detail(self, post_id: UUID, viewer_id: UUID | None) -> PostDetail:
        """Get post with comments (newest first) and whether the viewer likes it."""
        post = await self.get_post(post_id)
        views = await self.to_views([post])
        if not views:
            raise NotFoundError(f"Post '{post_id}' not found")

        comments = await self.store.list_comments(post_id)
        authors = await self.core.services.user.get_author_summaries({c.author_id for c in comments})
        comment_views = [
            CommentView.from_domain(comment, authors[comment.author_id])
            for comment in comments
            if comment.author_id in authors
        ]

        is_liked = False
        if viewer_id is not None:
            is_liked = await self.store.find_like_edge(viewer_id, post_id) is not None

        return PostDetail(post=views[0], comments=comment_views, is_liked=is_liked)

    async def list_map_posts(self, limit: int = MAP_POST_LIMIT) -> list[MapPost]:
        """Get geotagged posts, newest first, as map pins."""
        posts = await self.store.list_located_posts(limit)
        authors = await self.core.services.user.get_author_summaries({post.author_id for post in posts})
        return [
            MapPost(
                id=post.id,
                title=post.title,
                latitude=post.latitude,
                longitude=post.longitude,
                location=post.location,
                username=authors[post.author_id].username,
                created_at=post.created_at,
            )
            for post in posts
            if post.has_coordinates and post.author_id in authors
        ]

from uuid import UUID

import structlog

from soundmap.core.core import Service
from soundmap.core.modules.like.models import Like, LikeState

logger = structlog.get_logger(__name__)


class LikeService(Service):
    """Toggles likes on posts."""

    async def toggle_like(self, user_id: UUID, post_id: UUID) -> LikeState:
        """Like the post if not liked yet, otherwise remove the like.

        Raises:
            NotFoundError: If the post does not exist
        """
        post = await self.core.services.post.get_post(post_id)

        if await self.store.find_like_edge(user_id, post.id) is not None:
            await self.store.delete_like_edge(user_id, post.id)
            liked = False
        else:
            await self.store.create_like_edge(Like(user_id=user_id, post_id=post.id, created_at=self.core.clock()))
            liked = True

        like_count = await self.store.count_likes(post.id)
        logger.debug("like_toggled", user_id=user_id, post_id=post.id, liked=liked)
        return LikeState(post_id=post.id, liked=liked, like_count=like_count)

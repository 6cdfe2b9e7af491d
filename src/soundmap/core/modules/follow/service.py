from uuid import UUID

import structlog

from soundmap.core.core import Service
from soundmap.core.modules.follow.models import Follow, FollowState
from soundmap.errors import ConflictError

logger = structlog.get_logger(__name__)


class FollowService(Service):
    """Maintains the follow graph."""

    async def toggle_follow(self, follower_id: UUID, username: str) -> FollowState:
        """Follow the user if not followed yet, otherwise unfollow.

        Raises:
            NotFoundError: If no user has this username
            ConflictError: If the user tries to follow themselves
        """
        target = await self.core.services.user.get_user_by_username(username)
        if target.id == follower_id:
            raise ConflictError("You cannot follow yourself")

        if await self.store.find_follow_edge(follower_id, target.id) is not None:
            await self.store.delete_follow_edge(follower_id, target.id)
            following = False
        else:
            await self.store.create_follow_edge(
                Follow(follower_id=follower_id, following_id=target.id, created_at=self.core.clock())
            )
            following = True

        logger.debug("follow_toggled", follower_id=follower_id, following_id=target.id, following=following)
        return FollowState(username=target.username, following=following)

    async def is_following(self, follower_id: UUID, following_id: UUID) -> bool:
        return await self.store.find_follow_edge(follower_id, following_id) is not None

    async def get_following_ids(self, user_id: UUID) -> list[UUID]:
        return await self.store.list_following_ids(user_id)

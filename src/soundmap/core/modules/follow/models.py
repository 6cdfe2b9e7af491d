from uuid import UUID

from pydantic import BaseModel, Field

from soundmap.core.models import Entity


class Follow(Entity):
    """Directed edge: follower receives following's posts in their timeline.

    Indexed on (follower_id, following_id) - unique.
    """

    follower_id: UUID
    following_id: UUID


class FollowState(BaseModel):
    """Follow relation after a toggle."""

    username: str = Field(..., description="Target username")
    following: bool = Field(..., description="Whether the current user now follows the target")

from uuid import UUID

from pydantic import BaseModel, Field

from soundmap.core.models import Entity


class Like(Entity):
    """Presence of the record is the liked state. Indexed on (user_id, post_id) - unique."""

    user_id: UUID
    post_id: UUID


class LikeState(BaseModel):
    """Like relation after a toggle."""

    post_id: UUID = Field(..., description="Post ID")
    liked: bool = Field(..., description="Whether the current user now likes the post")
    like_count: int = Field(..., description="Likes on the post after the toggle", ge=0)

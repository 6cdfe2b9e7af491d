from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from soundmap.core.modules.post.models import PostView


class ProfileStats(BaseModel):
    posts: int = Field(..., ge=0)
    followers: int = Field(..., ge=0)
    following: int = Field(..., ge=0)


class Profile(BaseModel):
    """Public profile page of a user."""

    id: UUID
    username: str
    bio: str | None = None
    avatar_url: str | None = None
    created_at: datetime
    stats: ProfileStats
    posts: list[PostView]
    is_following: bool = Field(False, description="Whether the current user follows this user")
    is_own_profile: bool = False

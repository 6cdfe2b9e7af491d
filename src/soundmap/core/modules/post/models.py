from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from soundmap.core.models import Entity
from soundmap.core.modules.comment.models import CommentView
from soundmap.core.modules.user.models import AuthorSummary


class Post(Entity):
    """Audio post, optionally pinned to a map location.

    Indexed on author_id and created_at.
    """

    author_id: UUID
    title: str
    description: str | None = None
    audio_url: str
    latitude: float | None = None  # Set together with longitude, or not at all
    longitude: float | None = None
    location: str | None = None  # Free-text place label

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class PostView(BaseModel):
    """Post with author summary and counts computed at read time."""

    id: UUID = Field(..., description="Post ID")
    author: AuthorSummary
    title: str
    description: str | None = None
    audio_url: str
    latitude: float | None = None
    longitude: float | None = None
    location: str | None = None
    created_at: datetime
    like_count: int = Field(..., ge=0)
    comment_count: int = Field(..., ge=0)

    @classmethod
    def from_domain(cls, post: Post, author: AuthorSummary, like_count: int, comment_count: int) -> "PostView":
        return cls(
            id=post.id,
            author=author,
            title=post.title,
            description=post.description,
            audio_url=post.audio_url,
            latitude=post.latitude,
            longitude=post.longitude,
            location=post.location,
            created_at=post.created_at,
            like_count=like_count,
            comment_count=comment_count,
        )


class PostDetail(BaseModel):
    """Single post page: the post, its comments (newest first), and the viewer's like state."""

    post: PostView
    comments: list[CommentView]
    is_liked: bool = Field(False, description="Whether the current user likes this post")


class MapPost(BaseModel):
    """Map pin for a geotagged post."""

    id: UUID
    title: str
    latitude: float
    longitude: float
    location: str | None = None
    username: str
    created_at: datetime

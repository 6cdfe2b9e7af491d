from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from soundmap.core.models import Entity
from soundmap.core.modules.user.models import AuthorSummary


class Comment(Entity):
    """Comment on a post."""

    post_id: UUID
    author_id: UUID
    content: str


class CommentView(BaseModel):
    """Comment with its author (API representation)."""

    id: UUID = Field(..., description="Comment ID")
    post_id: UUID = Field(..., description="Post ID")
    author: AuthorSummary
    content: str
    created_at: datetime

    @classmethod
    def from_domain(cls, comment: Comment, author: AuthorSummary) -> "CommentView":
        return cls(
            id=comment.id,
            post_id=comment.post_id,
            author=author,
            content=comment.content,
            created_at=comment.created_at,
        )

from uuid import UUID

import structlog

from soundmap.core.core import Service
from soundmap.core.modules.comment.models import Comment
from soundmap.errors import ValidationError

logger = structlog.get_logger(__name__)

MAX_COMMENT_LENGTH = 1000


class CommentService(Service):
    """Manages comments on posts."""

    async def create_comment(self, post_id: UUID, author_id: UUID, content: str) -> Comment:
        """Add a comment to a post. Content is stored trimmed.

        Raises:
            ValidationError: If content is blank or too long
            NotFoundError: If the post does not exist
        """
        content = content.strip()
        if not content:
            raise ValidationError("Please enter a comment")
        if len(content) > MAX_COMMENT_LENGTH:
            raise ValidationError(f"Comment must be at most {MAX_COMMENT_LENGTH} characters")

        post = await self.core.services.post.get_post(post_id)
        comment = Comment(post_id=post.id, author_id=author_id, content=content, created_at=self.core.clock())
        await self.store.create_comment(comment)
        logger.debug("comment_created", comment_id=comment.id, post_id=post.id, author_id=author_id)
        return comment

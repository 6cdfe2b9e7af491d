"""Tests for comment creation."""

from uuid import uuid4

import pytest

from soundmap.core.modules.comment.service import MAX_COMMENT_LENGTH
from soundmap.errors import NotFoundError, ValidationError


class TestCreateComment:
    """Tests for CommentService.create_comment."""

    @pytest.mark.asyncio
    async def test_content_stored_trimmed(self, core, make_user, make_post):
        alice = await make_user("alice")
        post = await make_post(alice)

        comment = await core.services.comment.create_comment(post.id, alice.id, "  lovely rain  ")

        assert comment.content == "lovely rain"
        assert await core.store.list_comments(post.id) == [comment]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["", "   ", "\n\t"])
    async def test_blank_comment_rejected(self, core, make_user, make_post, content):
        alice = await make_user("alice")
        post = await make_post(alice)

        with pytest.raises(ValidationError, match="Please enter a comment"):
            await core.services.comment.create_comment(post.id, alice.id, content)

        assert await core.store.count_comments(post.id) == 0

    @pytest.mark.asyncio
    async def test_too_long_rejected(self, core, make_user, make_post):
        alice = await make_user("alice")
        post = await make_post(alice)

        with pytest.raises(ValidationError):
            await core.services.comment.create_comment(post.id, alice.id, "x" * (MAX_COMMENT_LENGTH + 1))

    @pytest.mark.asyncio
    async def test_unknown_post(self, core, make_user):
        alice = await make_user("alice")

        with pytest.raises(NotFoundError):
            await core.services.comment.create_comment(uuid4(), alice.id, "hello")

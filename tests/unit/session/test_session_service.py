"""Tests for the session store."""

from unittest.mock import AsyncMock
from uuid import UUID

import pytest

from soundmap.core.kv import KeyValueUnavailableError
from soundmap.core.modules.session.models import AuthToken, SessionData
from soundmap.errors import AuthenticationError


class TestCreateSession:
    """Tests for SessionService.create_session."""

    @pytest.mark.asyncio
    async def test_round_trip(self, core, make_user):
        """Test that a created token resolves to its payload."""
        user = await make_user("alice")
        payload = SessionData.for_user(user)

        token = await core.services.session.create_session(payload)

        assert await core.services.session.get_session(token) == payload

    @pytest.mark.asyncio
    async def test_tokens_are_unique_hex(self, core, make_user):
        """Test that each session gets a fresh 64-char hex token."""
        user = await make_user("alice")
        payload = SessionData.for_user(user)

        first = await core.services.session.create_session(payload)
        second = await core.services.session.create_session(payload)

        assert first != second
        assert len(first) == 64
        int(first, 16)

    @pytest.mark.asyncio
    async def test_session_expires_after_ttl(self, core, clock, make_user):
        """Test that a session is gone once its 7 day TTL passes."""
        user = await make_user("alice")
        token = await core.services.session.create_session(SessionData.for_user(user))

        clock.advance(days=7, seconds=-1)
        assert await core.services.session.get_session(token) is not None

        clock.advance(seconds=1)
        assert await core.services.session.get_session(token) is None


class TestGetSession:
    """Tests for SessionService.get_session."""

    @pytest.mark.asyncio
    async def test_unknown_token(self, core):
        assert await core.services.session.get_session(AuthToken("deadbeef")) is None

    @pytest.mark.asyncio
    async def test_corrupt_payload_treated_as_missing(self, core):
        """Test that an unparseable payload means no session rather than an error."""
        await core.kv.put("corrupt-token", b"{not json", 60)

        assert await core.services.session.get_session(AuthToken("corrupt-token")) is None

    @pytest.mark.asyncio
    async def test_payload_missing_fields_treated_as_missing(self, core):
        await core.kv.put("partial-token", b'{"username": "alice"}', 60)

        assert await core.services.session.get_session(AuthToken("partial-token")) is None

    @pytest.mark.asyncio
    async def test_store_unavailable_means_no_session(self, core, make_user):
        """Test that an unreachable store reads as no session instead of failing the request."""
        user = await make_user("alice")
        token = await core.services.session.create_session(SessionData.for_user(user))
        core.kv.get = AsyncMock(side_effect=KeyValueUnavailableError("connection refused"))

        assert await core.services.session.get_session(token) is None
        with pytest.raises(AuthenticationError):
            await core.services.session.get_authenticated_user(token)


class TestDeleteSession:
    """Tests for SessionService.delete_session."""

    @pytest.mark.asyncio
    async def test_delete_then_get(self, core, make_user):
        user = await make_user("alice")
        token = await core.services.session.create_session(SessionData.for_user(user))

        await core.services.session.delete_session(token)

        assert await core.services.session.get_session(token) is None

    @pytest.mark.asyncio
    async def test_delete_missing_is_noop(self, core):
        await core.services.session.delete_session(AuthToken("never-issued"))


class TestGetAuthenticatedUser:
    """Tests for SessionService.get_authenticated_user."""

    @pytest.mark.asyncio
    async def test_resolves_user(self, core, make_user):
        user = await make_user("alice")
        token = await core.services.session.create_session(SessionData.for_user(user))

        resolved = await core.services.session.get_authenticated_user(token)

        assert resolved.id == user.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, ""])
    async def test_missing_token(self, core, token):
        with pytest.raises(AuthenticationError):
            await core.services.session.get_authenticated_user(token)

    @pytest.mark.asyncio
    async def test_missing_user_deletes_session(self, core):
        """Test that a session pointing at a deleted user is removed and rejected."""
        ghost = SessionData(user_id=UUID(int=1), username="ghost", email="ghost@example.com")
        token = await core.services.session.create_session(ghost)

        with pytest.raises(AuthenticationError):
            await core.services.session.get_authenticated_user(token)

        assert await core.kv.get(token) is None

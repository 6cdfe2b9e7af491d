"""Tests for the fixed-window rate limiter."""

from datetime import timedelta

import pytest

from soundmap.core.modules.ratelimit.models import RateLimitCounter

WINDOW = timedelta(hours=1)


class TestCheckAndConsume:
    """Tests for RateLimitService.check_and_consume."""

    @pytest.mark.asyncio
    async def test_first_call_starts_window(self, core, clock):
        """Test that the first action opens a window ending one window length from now."""
        result = await core.services.ratelimit.check_and_consume("upload:u1", 10, WINDOW)

        assert result.allowed
        assert result.count == 1
        assert result.remaining == 9
        assert result.reset_at == clock() + WINDOW

    @pytest.mark.asyncio
    async def test_limit_boundary(self, core):
        """Test that exactly max_requests actions pass and the next one is refused."""
        limiter = core.services.ratelimit
        results = [await limiter.check_and_consume("upload:u1", 10, WINDOW) for _ in range(11)]

        assert all(r.allowed for r in results[:10])
        assert [r.remaining for r in results[:10]] == list(range(9, -1, -1))
        assert not results[10].allowed
        assert results[10].remaining == 0

    @pytest.mark.asyncio
    async def test_refusal_does_not_increment(self, core):
        """Test that refused actions leave the stored count unchanged."""
        limiter = core.services.ratelimit
        for _ in range(12):
            await limiter.check_and_consume("upload:u1", 2, WINDOW)

        stored = RateLimitCounter.model_validate_json(await core.kv.get("rate_limit:upload:u1"))
        assert stored.count == 2

    @pytest.mark.asyncio
    async def test_reset_at_stable_within_window(self, core, clock):
        """Test that later actions in the same window report the original reset time."""
        limiter = core.services.ratelimit
        first = await limiter.check_and_consume("upload:u1", 10, WINDOW)
        clock.advance(minutes=30)
        second = await limiter.check_and_consume("upload:u1", 10, WINDOW)

        assert second.reset_at == first.reset_at

    @pytest.mark.asyncio
    async def test_window_resets(self, core, clock):
        """Test that a full quota is available again once reset_at has passed."""
        limiter = core.services.ratelimit
        for _ in range(10):
            await limiter.check_and_consume("upload:u1", 10, WINDOW)
        assert not (await limiter.check_and_consume("upload:u1", 10, WINDOW)).allowed

        clock.advance(hours=1)
        result = await limiter.check_and_consume("upload:u1", 10, WINDOW)

        assert result.allowed
        assert result.count == 1
        assert result.reset_at == clock() + WINDOW

    @pytest.mark.asyncio
    async def test_scopes_are_independent(self, core):
        limiter = core.services.ratelimit
        await limiter.check_and_consume("upload:u1", 1, WINDOW)

        assert not (await limiter.check_and_consume("upload:u1", 1, WINDOW)).allowed
        assert (await limiter.check_and_consume("upload:u2", 1, WINDOW)).allowed

    @pytest.mark.asyncio
    async def test_corrupt_counter_starts_fresh(self, core):
        """Test that an unreadable stored counter is treated as absent."""
        await core.kv.put("rate_limit:upload:u1", b"garbage", 60)

        result = await core.services.ratelimit.check_and_consume("upload:u1", 10, WINDOW)

        assert result.allowed
        assert result.count == 1

    @pytest.mark.asyncio
    async def test_counter_expires_with_window(self, core, clock):
        """Test that the stored counter's TTL ends with the window."""
        await core.services.ratelimit.check_and_consume("upload:u1", 10, WINDOW)

        clock.advance(minutes=59, seconds=59)
        assert await core.kv.get("rate_limit:upload:u1") is not None
        clock.advance(seconds=1)
        assert await core.kv.get("rate_limit:upload:u1") is None

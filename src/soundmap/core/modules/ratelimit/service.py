import math
from datetime import timedelta

import structlog
from pydantic import ValidationError as PydanticValidationError

from soundmap.core.core import Service
from soundmap.core.modules.ratelimit.models import RateLimitCounter, RateLimitResult

logger = structlog.get_logger(__name__)

KEY_PREFIX = "rate_limit:"


class RateLimitService(Service):
    """Fixed-window counters per scope, kept in the key-value store.

    The read-modify-write below is not atomic: concurrent calls for the same
    scope can each read the same count, so a burst may overrun the limit by a
    few requests. The limiter deters abuse; it is not a hard quota.
    """

    async def check_and_consume(self, scope: str, max_requests: int, window: timedelta) -> RateLimitResult:
        """Record one action for scope if the window still has room.

        Args:
            scope: Counter scope, e.g. "upload:<user_id>"
            max_requests: Actions allowed per window
            window: Window length, starting at the first action

        Returns:
            Whether the action is allowed, what remains, and when the window resets
        """
        key = KEY_PREFIX + scope
        current = self.core.clock()

        counter = await self._read_counter(key)
        if counter is None or current >= counter.reset_at:
            counter = RateLimitCounter(count=0, reset_at=current + window)

        if counter.count >= max_requests:
            logger.info("rate_limit_exceeded", scope=scope, reset_at=counter.reset_at.isoformat())
            return RateLimitResult(allowed=False, remaining=0, reset_at=counter.reset_at, count=counter.count)

        counter.count += 1
        ttl_seconds = max(1, math.ceil((counter.reset_at - current).total_seconds()))
        await self.core.kv.put(key, counter.model_dump_json().encode("utf-8"), ttl_seconds)

        return RateLimitResult(
            allowed=True,
            remaining=max_requests - counter.count,
            reset_at=counter.reset_at,
            count=counter.count,
        )

    async def _read_counter(self, key: str) -> RateLimitCounter | None:
        data = await self.core.kv.get(key)
        if data is None:
            return None
        try:
            return RateLimitCounter.model_validate_json(data)
        except PydanticValidationError:
            logger.warning("rate_limit_counter_corrupt", key=key)
            return None

"""
Redis fixed-window counter store.

One key per identity; the window is the key's TTL. A MULTI/EXEC pipeline
runs SET NX PX (open a window if none), INCR and PTTL as one atomic unit,
so concurrent requests on any node see distinct counts.

Fail-open: if Redis is unreachable the attempt is allowed and the error is
logged, so a cache outage does not lock every user out of password reset.
"""

import logging
from typing import Callable

from redis.asyncio import Redis
from redis.exceptions import RedisError

from src.app.services.rate_limit_store import RateLimitHit, RateLimitStore, now_millis

logger = logging.getLogger(__name__)

KEY_PREFIX = "rate_limit:"


class RedisRateLimitStore(RateLimitStore):
    def __init__(self, redis: Redis, clock: Callable[[], int] = now_millis):
        self.redis = redis
        self._clock = clock

    async def hit(self, key: str, window_millis: int, limit: int) -> RateLimitHit:
        redis_key = f"{KEY_PREFIX}{key}"
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.set(redis_key, 0, px=window_millis, nx=True)
                pipe.incr(redis_key)
                pipe.pttl(redis_key)
                _, count, ttl_millis = await pipe.execute()
        except RedisError as exc:
            logger.error(f"Rate limit store unavailable, allowing request | key={key} error={exc!r}")
            return RateLimitHit(True, 0, self._clock() + window_millis)

        count = int(count)
        ttl_millis = int(ttl_millis)
        if ttl_millis < 0:
            # Key lost its TTL (e.g. restored without expiry); start a fresh window
            ttl_millis = window_millis
            try:
                await self.redis.pexpire(redis_key, window_millis)
            except RedisError as exc:
                logger.error(f"Failed to restore rate limit window | key={key} error={exc!r}")

        return RateLimitHit(count <= limit, count, self._clock() + ttl_millis)

    async def reset(self, key: str) -> None:
        try:
            await self.redis.delete(f"{KEY_PREFIX}{key}")
        except RedisError as exc:
            logger.error(f"Failed to reset rate limit key | key={key} error={exc!r}")

"""
Fixed-window rate limiter.

Counts attempts per identity key inside fixed windows. A burst straddling
a window boundary can see up to 2 x max_per_window accepted attempts in a
short span; that imprecision is accepted for throttling reset requests.
"""

from dataclasses import dataclass
from typing import Optional

from src.app.services.rate_limit_store import RateLimitStore


class InvalidArgumentError(ValueError):
    pass


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    count: int
    reset_at: int  # epoch milliseconds when the window rolls over

    @property
    def retry_at(self) -> Optional[int]:
        return None if self.allowed else self.reset_at


class RateLimiter:
    def __init__(self, store: RateLimitStore):
        self.store = store

    async def check(self, key: str, window_millis: int, max_per_window: int) -> RateLimitDecision:
        if not key:
            raise InvalidArgumentError("key must be a non-empty string")
        if window_millis <= 0:
            raise InvalidArgumentError("window_millis must be positive")
        if max_per_window < 1:
            raise InvalidArgumentError("max_per_window must be at least 1")

        hit = await self.store.hit(key, window_millis, max_per_window)
        return RateLimitDecision(
            allowed=hit.allowed, count=hit.count, reset_at=hit.window_reset_at
        )

    async def reset(self, key: str) -> None:
        await self.store.reset(key)

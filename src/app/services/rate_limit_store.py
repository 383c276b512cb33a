import time
from abc import ABC, abstractmethod
from dataclasses import dataclass


def now_millis() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class RateLimitHit:
    """Outcome of one atomic increment-and-get against a fixed window."""

    allowed: bool
    count: int
    window_reset_at: int  # epoch milliseconds


class RateLimitStore(ABC):
    """
    Storage boundary for fixed-window counters.

    ``hit`` must be atomic per key: concurrent callers can never both
    observe the same count.
    """

    @abstractmethod
    async def hit(self, key: str, window_millis: int, limit: int) -> RateLimitHit:
        """
        Record one attempt for key.

        Starts a new window (count = 1) when none exists or the current
        one has elapsed; otherwise counts the attempt against the current
        window. The attempt is allowed while the count stays within limit.
        """
        pass

    @abstractmethod
    async def reset(self, key: str) -> None:
        """Forget the window for key"""
        pass

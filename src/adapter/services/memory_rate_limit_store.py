"""
In-process fixed-window counter store.

Single-process only: each worker holds its own counters, so limits are
not shared between processes or nodes. Use RedisRateLimitStore there.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Dict

from src.app.services.rate_limit_store import RateLimitHit, RateLimitStore, now_millis

logger = logging.getLogger(__name__)


@dataclass
class RateLimitEntry:
    count: int
    window_reset_at: int  # epoch milliseconds


class MemoryRateLimitStore(RateLimitStore):
    """
    Lock-guarded dict of RateLimitEntry keyed by identity string.

    Expired entries are garbage-collected at most once per gc_interval_millis
    so the map does not grow without bound.
    """

    def __init__(
        self,
        clock: Callable[[], int] = now_millis,
        gc_interval_millis: int = 5 * 60 * 1000,
    ):
        self._entries: Dict[str, RateLimitEntry] = {}
        self._lock = asyncio.Lock()
        self._clock = clock
        self._gc_interval_millis = gc_interval_millis
        self._last_gc_at = clock()

    def __len__(self) -> int:
        return len(self._entries)

    async def hit(self, key: str, window_millis: int, limit: int) -> RateLimitHit:
        async with self._lock:
            now = self._clock()
            self._maybe_collect(now)

            entry = self._entries.get(key)
            if entry is None or now >= entry.window_reset_at:
                entry = RateLimitEntry(count=1, window_reset_at=now + window_millis)
                self._entries[key] = entry
                return RateLimitHit(True, entry.count, entry.window_reset_at)

            if entry.count < limit:
                entry.count += 1
                return RateLimitHit(True, entry.count, entry.window_reset_at)

            return RateLimitHit(False, entry.count, entry.window_reset_at)

    async def reset(self, key: str) -> None:
        async with self._lock:
            self._entries.pop(key, None)

    async def purge_expired(self) -> int:
        async with self._lock:
            return self._purge(self._clock())

    def _maybe_collect(self, now: int) -> None:
        if now - self._last_gc_at < self._gc_interval_millis:
            return
        removed = self._purge(now)
        if removed:
            logger.debug(f"Purged {removed} expired rate limit entries")

    def _purge(self, now: int) -> int:
        expired = [key for key, entry in self._entries.items() if now >= entry.window_reset_at]
        for key in expired:
            del self._entries[key]
        self._last_gc_at = now
        return len(expired)

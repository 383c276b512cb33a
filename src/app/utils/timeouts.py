import asyncio
from typing import Awaitable, TypeVar

T = TypeVar("T")


async def with_timeout(awaitable: Awaitable[T], seconds: float) -> T:
    """Await a collaborator call, raising asyncio.TimeoutError after `seconds`."""
    return await asyncio.wait_for(awaitable, timeout=seconds)

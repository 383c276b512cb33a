import pytest
from unittest.mock import AsyncMock, MagicMock

from src.adapter.services.memory_rate_limit_store import MemoryRateLimitStore
from src.app.services.rate_limiter import RateLimiter


class FakeClock:
    """Controllable epoch-millisecond clock"""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, millis: int) -> None:
        self.now += millis


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rate_limiter(clock):
    return RateLimiter(MemoryRateLimitStore(clock=clock))


@pytest.fixture
def email_sender():
    sender = MagicMock()
    sender.send = AsyncMock(return_value=None)
    return sender


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories used by the use cases"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.update = AsyncMock(side_effect=lambda user: user)

    uow.password_reset_tokens = MagicMock()
    uow.password_reset_tokens.create = AsyncMock(side_effect=lambda token: token)
    uow.password_reset_tokens.get_by_token_hash = AsyncMock(return_value=None)
    uow.password_reset_tokens.update = AsyncMock(side_effect=lambda token: token)
    uow.password_reset_tokens.delete_all_for_user = AsyncMock(return_value=0)
    uow.password_reset_tokens.delete_expired = AsyncMock(return_value=0)

    uow.course_materials = MagicMock()
    uow.course_materials.get_for_user = AsyncMock(return_value=None)
    uow.course_materials.update = AsyncMock(side_effect=lambda material: material)

    return uow

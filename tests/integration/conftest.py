from typing import List

import bcrypt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.memory_rate_limit_store import MemoryRateLimitStore
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.app import create_app
from src.app.services.email_sender import IEmailSender
from src.app.services.rate_limiter import RateLimiter
from src.depends import get_email_sender, get_rate_limiter, get_unit_of_work
from src.domain.entities import User

TEST_PASSWORD = "OldPassword123!"


class RecordingEmailSender(IEmailSender):
    """Captures outgoing mail instead of talking to SMTP"""

    def __init__(self):
        self.sent: List[dict] = []

    async def send(self, to: str, subject: str, html: str, text: str) -> None:
        self.sent.append({"to": to, "subject": subject, "html": html, "text": text})


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def email_sender():
    return RecordingEmailSender()


@pytest.fixture
def rate_limiter():
    return RateLimiter(MemoryRateLimitStore())


@pytest.fixture
def app(db_session, email_sender, rate_limiter):
    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def user(db_session):
    password_hash = bcrypt.hashpw(TEST_PASSWORD.encode(), bcrypt.gensalt(4)).decode()
    user = User(email="user@example.com", password_hash=password_hash)
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
def user_id(user):
    # Read before any request: the request's rollback expires loaded instances
    return user.id

from datetime import timedelta
from functools import lru_cache
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.memory_rate_limit_store import MemoryRateLimitStore
from src.adapter.services.redis_rate_limit_store import RedisRateLimitStore
from src.adapter.services.smtp_email_sender import SmtpEmailSender
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.utils.jwt import decode_access_token
from src.app.services.email_sender import IEmailSender
from src.app.services.rate_limit_store import RateLimitStore
from src.app.services.rate_limiter import RateLimiter
from src.app.use_cases.auth import PasswordResetPolicy

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer()


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def build_rate_limit_store(backend: str) -> RateLimitStore:
    if backend == "redis":
        redis = Redis.from_url(ApplicationConfig.REDIS_URL, decode_responses=True)
        return RedisRateLimitStore(redis)
    if backend == "memory":
        return MemoryRateLimitStore(
            gc_interval_millis=int(ApplicationConfig.RATE_LIMIT_GC_INTERVAL_SECONDS * 1000)
        )
    raise ValueError(f"Unknown RATE_LIMIT_BACKEND: {backend!r}")


@lru_cache
def get_rate_limiter() -> RateLimiter:
    # Process-wide: counters must outlive individual requests
    return RateLimiter(build_rate_limit_store(ApplicationConfig.RATE_LIMIT_BACKEND))


@lru_cache
def get_email_sender() -> IEmailSender:
    return SmtpEmailSender(
        host=ApplicationConfig.SMTP_HOST,
        port=ApplicationConfig.SMTP_PORT,
        username=ApplicationConfig.SMTP_USER,
        password=ApplicationConfig.SMTP_PASSWORD,
        from_email=ApplicationConfig.SMTP_FROM,
        from_name=ApplicationConfig.APP_NAME,
        start_tls=ApplicationConfig.SMTP_START_TLS,
        max_attempts=ApplicationConfig.EMAIL_MAX_ATTEMPTS,
        retry_base_seconds=ApplicationConfig.EMAIL_RETRY_BASE_SECONDS,
        timeout_seconds=ApplicationConfig.EXTERNAL_CALL_TIMEOUT_SECONDS,
    )


def get_password_reset_policy() -> PasswordResetPolicy:
    window = timedelta(seconds=ApplicationConfig.PASSWORD_RESET_RATE_LIMIT_WINDOW_SECONDS)
    return PasswordResetPolicy(
        token_ttl=timedelta(minutes=ApplicationConfig.PASSWORD_RESET_TOKEN_TTL_MINUTES),
        rate_limit_window=window,
        max_per_email=ApplicationConfig.PASSWORD_RESET_MAX_PER_EMAIL,
        max_per_origin_email=ApplicationConfig.PASSWORD_RESET_MAX_PER_ORIGIN_EMAIL,
        call_timeout_seconds=ApplicationConfig.EXTERNAL_CALL_TIMEOUT_SECONDS,
        email_timeout_seconds=ApplicationConfig.EMAIL_TIMEOUT_SECONDS,
        surface_store_errors=ApplicationConfig.PASSWORD_RESET_SURFACE_STORE_ERRORS,
        app_name=ApplicationConfig.APP_NAME,
        app_url=ApplicationConfig.APP_URL,
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> UUID:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        ID of the authenticated user

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    return user_id


async def create_tables() -> None:
    """Create missing tables; existing ones are left untouched."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

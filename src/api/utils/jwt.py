from datetime import UTC, datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt

from config import ApplicationConfig

ALGORITHM = "HS256"


def create_access_token(user_id: UUID, expires_delta: timedelta = timedelta(minutes=15)) -> str:
    """
    Create a bearer token for the materials routes

    Args:
        user_id: User UUID
        expires_delta: Token lifetime

    Returns:
        JWT string signed with JWT_SECRET
    """
    issued_at = datetime.now(UTC)
    claims = {"user_id": str(user_id), "iat": issued_at, "exp": issued_at + expires_delta}
    return jwt.encode(claims, ApplicationConfig.JWT_SECRET, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[UUID]:
    """Return the user id carried by a valid, unexpired token, else None"""
    try:
        claims = jwt.decode(token, ApplicationConfig.JWT_SECRET, algorithms=[ALGORITHM])
        return UUID(claims["user_id"])
    except (JWTError, KeyError, TypeError, ValueError):
        return None

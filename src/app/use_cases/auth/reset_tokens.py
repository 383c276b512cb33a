"""
Reset token primitives shared by issuance and consumption.

The raw token only ever lives in memory and in the emailed link; the
database sees its SHA-256 digest.
"""

import hashlib
import hmac
import secrets
from datetime import datetime
from typing import Tuple

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import PasswordResetToken

TOKEN_BYTES = 32  # 256 bits


def generate_reset_token() -> Tuple[str, str]:
    """Return (raw_token, token_hash); raw_token is 64 hex characters."""
    raw_token = secrets.token_bytes(TOKEN_BYTES).hex()
    return raw_token, hash_reset_token(raw_token)


def hash_reset_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode()).hexdigest()


async def find_usable_token(
    uow: UnitOfWork, raw_token: str, now: datetime
) -> Result[PasswordResetToken]:
    """
    Resolve a submitted raw token to its stored row.

    Errors:
        - INVALID_TOKEN: no row matches the digest
        - TOKEN_ALREADY_USED: row was invalidated
        - TOKEN_EXPIRED: row is past expires_at
    """
    token_hash = hash_reset_token(raw_token)
    reset_token = await uow.password_reset_tokens.get_by_token_hash(token_hash)

    if reset_token is None or not hmac.compare_digest(reset_token.token_hash, token_hash):
        return Return.err(Error("INVALID_TOKEN", "Invalid or expired token"))

    if reset_token.used_at is not None:
        return Return.err(Error("TOKEN_ALREADY_USED", "Token has already been used"))

    if reset_token.is_expired(now):
        return Return.err(Error("TOKEN_EXPIRED", "Token has expired"))

    return Return.ok(reset_token)

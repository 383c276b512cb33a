"""
Cleanup Expired Reset Tokens Use Case

Periodic sweep, triggered by an operator or cron job.
"""

import logging

from src.libs.result import Error, Result, Return
from src.app.errors import PersistenceError
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from .dtos import CleanupExpiredTokensResponse

logger = logging.getLogger(__name__)


class CleanupExpiredResetTokensUseCase:
    """
    Deletes every reset token whose expires_at has passed.

    Idempotent, and never touches tokens that are still active, so it can
    run while new tokens are being issued.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[CleanupExpiredTokensResponse]:
        async with self.uow:
            try:
                deleted = await self.uow.password_reset_tokens.delete_expired(utcnow())
                await self.uow.commit()
            except PersistenceError as exc:
                logger.error(f"Error cleaning up expired tokens | error={exc!r}")
                return Return.err(
                    Error("TOKEN_STORE_ERROR", "Failed to cleanup expired tokens")
                )

        logger.info(f"Cleaned up expired password reset tokens | deleted={deleted}")
        return Return.ok(
            CleanupExpiredTokensResponse(
                message="Expired tokens cleaned up successfully", deleted=deleted
            )
        )

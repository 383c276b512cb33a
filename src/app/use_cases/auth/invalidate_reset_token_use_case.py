"""
Invalidate Reset Token Use Case

Marks a reset token as used so it can no longer be consumed.
"""

import logging

from src.libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from .dtos import PasswordResetMessageResponse
from .reset_tokens import find_usable_token

logger = logging.getLogger(__name__)


class InvalidateResetTokenUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: str) -> Result[PasswordResetMessageResponse]:
        async with self.uow:
            now = utcnow()
            found = await find_usable_token(self.uow, token, now)
            if found.is_err():
                return Return.err(found.error)

            reset_token = found.value
            reset_token.used_at = now
            await self.uow.password_reset_tokens.update(reset_token)
            await self.uow.commit()

            logger.info(f"Password reset token invalidated | token_id={reset_token.id}")
            return Return.ok(
                PasswordResetMessageResponse(message="Token has been invalidated")
            )

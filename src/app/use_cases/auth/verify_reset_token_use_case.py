"""
Verify Reset Token Use Case

Lets the reset page check a link before asking for a new password.
"""

import logging

from src.libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from .dtos import VerifyResetTokenResponse
from .reset_tokens import find_usable_token

logger = logging.getLogger(__name__)


class VerifyResetTokenUseCase:
    """Checks a raw token against stored digests without consuming it."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: str) -> Result[VerifyResetTokenResponse]:
        async with self.uow:
            found = await find_usable_token(self.uow, token, utcnow())
            if found.is_err():
                logger.warning(f"Reset token verification failed | reason={found.error.code}")
                return Return.err(found.error)

            return Return.ok(VerifyResetTokenResponse(valid=True, message="Token is valid"))

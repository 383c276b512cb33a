"""
Confirm Password Reset Use Case

Handles password reset confirmation with secure token validation.
"""

import logging
import re

import bcrypt

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from .dtos import PasswordResetMessageResponse
from .reset_tokens import find_usable_token

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
# bcrypt only accepts the first 72 bytes of input
MAX_PASSWORD_BYTES = 72
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])")


class ConfirmPasswordResetUseCase:
    """
    Use case for confirming password reset.

    Business Rules:
    - Token is validated by hashing and comparing with stored hash
    - Token must not be expired (15 minute window)
    - Token must not have been invalidated
    - New password: min 8 chars, at most 72 bytes UTF-8, with lower, upper,
      digit and special char
    - Password is hashed with bcrypt (cost factor 12)
    - Every reset token of the user is deleted after a successful reset
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def _validate_password(self, password: str) -> Result[None]:
        """
        Validate password complexity.

        Args:
            password: Password to validate

        Returns:
            Result with None if valid, or Error if invalid
        """
        if len(password) < MIN_PASSWORD_LENGTH:
            return Return.err(
                Error(
                    "INVALID_PASSWORD",
                    "Password must be at least 8 characters long",
                )
            )

        if len(password.encode()) > MAX_PASSWORD_BYTES:
            return Return.err(
                Error(
                    "INVALID_PASSWORD",
                    "Password must be at most 72 bytes long",
                )
            )

        if not PASSWORD_PATTERN.match(password):
            return Return.err(
                Error(
                    "INVALID_PASSWORD",
                    "Password must contain at least one uppercase letter, one lowercase "
                    "letter, one number, and one special character",
                )
            )

        return Return.ok(None)

    async def execute(self, token: str, new_password: str) -> Result[PasswordResetMessageResponse]:
        """
        Execute confirm password reset use case.

        Args:
            token: Password reset token (plain text from email)
            new_password: New password to set

        Returns:
            Result with confirmation message, or Error

        Errors:
            - INVALID_PASSWORD: Password does not meet complexity requirements
            - INVALID_TOKEN: Token not found
            - TOKEN_EXPIRED: Token has expired
            - TOKEN_ALREADY_USED: Token was invalidated
            - USER_NOT_FOUND: Token owner no longer exists
        """
        password_validation = self._validate_password(new_password)
        if password_validation.is_err():
            return Return.err(password_validation.error)

        async with self.uow:
            now = utcnow()
            found = await find_usable_token(self.uow, token, now)
            if found.is_err():
                logger.warning(f"Invalid token for password reset | reason={found.error.code}")
                return Return.err(found.error)

            reset_token = found.value

            user = await self.uow.users.get_by_id(reset_token.user_id)
            if user is None:
                logger.error(f"User lookup failed for reset token | user_id={reset_token.user_id}")
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            password_hash = bcrypt.hashpw(new_password.encode(), bcrypt.gensalt(12))
            user.password_hash = password_hash.decode()
            user.password_changed_at = now
            await self.uow.users.update(user)
            user_id = user.id

            # Consumes this token and any other row left for the user
            await self.uow.password_reset_tokens.delete_all_for_user(user_id)

            await self.uow.commit()

        logger.info(f"Password reset completed | user_id={user_id}")
        return Return.ok(
            PasswordResetMessageResponse(
                message="Password has been successfully reset. "
                "You can now sign in with your new password."
            )
        )

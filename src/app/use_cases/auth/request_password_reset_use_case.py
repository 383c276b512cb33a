"""
Request Password Reset Use Case

Handles throttling, issuing and emailing password reset tokens.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Callable, Optional

from src.libs.result import Error, Result, Return
from src.app.errors import EmailDispatchError, PersistenceError
from src.app.services.email_sender import IEmailSender
from src.app.services.email_templates import (
    EmailTemplate,
    build_reset_link,
    password_reset_email,
)
from src.app.services.rate_limiter import RateLimiter
from src.app.services.unit_of_work import UnitOfWork
from src.app.utils.masking import mask_email
from src.app.utils.timeouts import with_timeout
from src.domain.base import utcnow
from src.domain.entities import PasswordResetToken
from .dtos import PasswordResetMessageResponse, RequestPasswordResetCommand
from .reset_tokens import generate_reset_token

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = (
    "If an account with this email exists, you will receive password reset instructions."
)
RATE_LIMIT_MESSAGE = "Too many requests. Please try again later."


@dataclass(frozen=True)
class PasswordResetPolicy:
    token_ttl: timedelta = timedelta(minutes=15)
    rate_limit_window: timedelta = timedelta(minutes=15)
    max_per_email: int = 3
    max_per_origin_email: int = 3
    call_timeout_seconds: float = 10.0
    email_timeout_seconds: float = 30.0
    surface_store_errors: bool = False
    app_name: str = "StudIQ"
    app_url: str = "http://localhost:3000"


class RequestPasswordResetUseCase:
    """
    Use case for requesting password reset.

    Business Rules:
    - Two rate limit layers must both pass: per email, and per
      (client origin, email)
    - 256-bit random token, hex encoded for the link, SHA-256 digest stored
    - Token expires 15 minutes after issuance
    - Prior tokens for the account are deleted before the new one is stored
    - No email enumeration: every outcome after the rate limit check
      returns the same message
    - Raw token is never persisted or logged
    - With a `schedule` hook (e.g. BackgroundTasks.add_task) the email is
      sent after the response, so known and unknown emails return equally fast
    """

    def __init__(
        self,
        uow: UnitOfWork,
        rate_limiter: RateLimiter,
        email_sender: IEmailSender,
        policy: PasswordResetPolicy = PasswordResetPolicy(),
        schedule: Optional[Callable[..., Any]] = None,
    ):
        self.uow = uow
        self.rate_limiter = rate_limiter
        self.email_sender = email_sender
        self.policy = policy
        self.schedule = schedule

    def _generic(self) -> Result[PasswordResetMessageResponse]:
        return Return.ok(PasswordResetMessageResponse(message=GENERIC_MESSAGE))

    async def _check_rate_limits(self, email: str, client_origin: str) -> Result[None]:
        window_millis = int(self.policy.rate_limit_window.total_seconds() * 1000)
        layers = (
            (f"forgot_password:{email}", self.policy.max_per_email),
            (f"forgot_password:{client_origin}:{email}", self.policy.max_per_origin_email),
        )
        for key, limit in layers:
            decision = await self.rate_limiter.check(key, window_millis, limit)
            if not decision.allowed:
                retry_at = datetime.fromtimestamp(decision.reset_at / 1000, tz=UTC)
                logger.warning(
                    f"Rate limit exceeded for password reset | email={mask_email(email)} "
                    f"origin={client_origin} attempts={decision.count}"
                )
                return Return.err(
                    Error(
                        "RATE_LIMITED",
                        RATE_LIMIT_MESSAGE,
                        {"retryAt": retry_at.isoformat().replace("+00:00", "Z")},
                    )
                )
        return Return.ok(None)

    async def _replace_token(self, token: PasswordResetToken) -> None:
        await self.uow.password_reset_tokens.delete_all_for_user(token.user_id)
        await self.uow.password_reset_tokens.create(token)
        await self.uow.commit()

    async def _send_reset_email(self, email: str, user_id, template: EmailTemplate) -> None:
        masked = mask_email(email)
        try:
            await with_timeout(
                self.email_sender.send(email, template.subject, template.html, template.text),
                self.policy.email_timeout_seconds,
            )
            logger.info(f"Password reset email sent | email={masked} user_id={user_id}")
        except (EmailDispatchError, asyncio.TimeoutError) as exc:
            # Token stays valid; the user can request again
            logger.error(
                f"Failed to send password reset email | email={masked} "
                f"user_id={user_id} error={exc!r}"
            )

    async def execute(
        self, command: RequestPasswordResetCommand
    ) -> Result[PasswordResetMessageResponse]:
        """
        Execute request password reset use case.

        Args:
            command: email and client origin of the request

        Returns:
            Result with the generic message, or Error

        Errors:
            - RATE_LIMITED: either rate limit layer denied (details.retryAt)
            - TOKEN_STORE_ERROR: token could not be stored, only when the
              policy surfaces store errors
        """
        email = command.email.strip().lower()
        masked = mask_email(email)

        limited = await self._check_rate_limits(email, command.client_origin)
        if limited.is_err():
            return limited

        async with self.uow:
            try:
                user = await with_timeout(
                    self.uow.users.get_by_email(email), self.policy.call_timeout_seconds
                )
            except (PersistenceError, asyncio.TimeoutError) as exc:
                logger.error(f"Account lookup failed | email={masked} error={exc!r}")
                return self._generic()

            if user is None:
                logger.info(f"Password reset requested for unknown email | email={masked}")
                return self._generic()

            user_id = user.id
            raw_token, token_hash = generate_reset_token()
            expires_at = utcnow() + self.policy.token_ttl
            reset_token = PasswordResetToken(
                user_id=user_id, token_hash=token_hash, expires_at=expires_at
            )

            try:
                await with_timeout(
                    self._replace_token(reset_token), self.policy.call_timeout_seconds
                )
            except (PersistenceError, asyncio.TimeoutError) as exc:
                logger.critical(
                    f"Failed to store password reset token | email={masked} "
                    f"user_id={user_id} error={exc!r}"
                )
                if self.policy.surface_store_errors:
                    return Return.err(
                        Error("TOKEN_STORE_ERROR", "Failed to store reset token")
                    )
                return self._generic()

        logger.info(
            f"Password reset token stored | email={masked} user_id={user_id} "
            f"expires_at={expires_at.isoformat()}"
        )

        template = password_reset_email(
            reset_link=build_reset_link(self.policy.app_url, raw_token),
            user_email=email,
            app_name=self.policy.app_name,
            app_url=self.policy.app_url,
            ttl_minutes=int(self.policy.token_ttl.total_seconds() // 60),
        )
        if self.schedule is None:
            await self._send_reset_email(email, user_id, template)
        else:
            self.schedule(self._send_reset_email, email, user_id, template)

        return self._generic()

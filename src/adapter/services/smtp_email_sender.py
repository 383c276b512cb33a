"""
Async SMTP email delivery via aiosmtplib.

Sends multipart (text + HTML) messages with STARTTLS, retrying with
exponential backoff. Raises EmailDispatchError once every attempt failed
or when SMTP is not configured.
"""

import asyncio
import logging
from email.message import EmailMessage
from typing import Awaitable, Callable, Optional

import aiosmtplib

from src.app.errors import EmailDispatchError
from src.app.services.email_sender import IEmailSender
from src.app.utils.masking import mask_email

logger = logging.getLogger(__name__)


class SmtpEmailSender(IEmailSender):
    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        from_email: str = "",
        from_name: str = "StudIQ",
        start_tls: bool = True,
        max_attempts: int = 3,
        retry_base_seconds: float = 1.0,
        timeout_seconds: float = 10.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_email = from_email or username
        self.from_name = from_name
        self.start_tls = start_tls
        self.max_attempts = max_attempts
        self.retry_base_seconds = retry_base_seconds
        self.timeout_seconds = timeout_seconds
        self._sleep = sleep

    def is_configured(self) -> bool:
        return bool(self.host and self.username and self.password)

    def _build_message(self, to: str, subject: str, html: str, text: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = f'"{self.from_name}" <{self.from_email}>'
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(text)
        msg.add_alternative(html, subtype="html")
        return msg

    async def send(self, to: str, subject: str, html: str, text: str) -> None:
        if not self.is_configured():
            logger.error("Email service not configured: missing SMTP settings")
            raise EmailDispatchError("Email service not configured")

        msg = self._build_message(to, subject, html, text)
        last_error: Optional[Exception] = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                await aiosmtplib.send(
                    msg,
                    hostname=self.host,
                    port=self.port,
                    username=self.username,
                    password=self.password,
                    start_tls=self.start_tls,
                    timeout=self.timeout_seconds,
                )
                logger.info(
                    f"Email sent to {mask_email(to)} (attempt {attempt}/{self.max_attempts})"
                )
                return
            except (aiosmtplib.SMTPException, OSError) as exc:
                last_error = exc
                logger.warning(
                    f"Email send attempt {attempt}/{self.max_attempts} failed "
                    f"for {mask_email(to)}: {exc}"
                )
                if attempt < self.max_attempts:
                    await self._sleep(self.retry_base_seconds * 2 ** attempt)

        raise EmailDispatchError(
            f"Failed to send email after {self.max_attempts} attempts: {last_error}"
        )

"""
Unit tests for SmtpEmailSender

aiosmtplib.send is patched; backoff sleeps are recorded instead of awaited.
"""
from unittest.mock import AsyncMock, patch

import aiosmtplib
import pytest

from src.adapter.services.smtp_email_sender import SmtpEmailSender
from src.app.errors import EmailDispatchError


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def sender(sleeps):
    async def fake_sleep(seconds):
        sleeps.append(seconds)

    return SmtpEmailSender(
        host="smtp.example.com",
        port=587,
        username="mailer@example.com",
        password="secret",
        from_name="StudIQ",
        sleep=fake_sleep,
    )


@pytest.mark.asyncio
async def test_send_success_first_attempt(sender, sleeps):
    with patch("aiosmtplib.send", new_callable=AsyncMock) as mock_send:
        await sender.send("user@example.com", "Subject", "<p>Hi</p>", "Hi")

    mock_send.assert_awaited_once()
    message = mock_send.await_args.args[0]
    assert message["To"] == "user@example.com"
    assert message["Subject"] == "Subject"
    assert "mailer@example.com" in message["From"]
    assert message.is_multipart()
    assert mock_send.await_args.kwargs["hostname"] == "smtp.example.com"
    assert mock_send.await_args.kwargs["start_tls"] is True
    assert sleeps == []


@pytest.mark.asyncio
async def test_send_retries_with_exponential_backoff(sender, sleeps):
    failures = [aiosmtplib.SMTPException("busy"), ConnectionRefusedError("refused"), None]

    with patch("aiosmtplib.send", new_callable=AsyncMock, side_effect=failures) as mock_send:
        await sender.send("user@example.com", "Subject", "<p>Hi</p>", "Hi")

    assert mock_send.await_count == 3
    assert sleeps == [2.0, 4.0]


@pytest.mark.asyncio
async def test_send_gives_up_after_max_attempts(sender, sleeps):
    with patch(
        "aiosmtplib.send", new_callable=AsyncMock, side_effect=aiosmtplib.SMTPException("down")
    ) as mock_send:
        with pytest.raises(EmailDispatchError):
            await sender.send("user@example.com", "Subject", "<p>Hi</p>", "Hi")

    assert mock_send.await_count == 3
    assert sleeps == [2.0, 4.0]


@pytest.mark.asyncio
async def test_send_not_configured():
    sender = SmtpEmailSender(host="", port=587, username="", password="")

    assert sender.is_configured() is False
    with patch("aiosmtplib.send", new_callable=AsyncMock) as mock_send:
        with pytest.raises(EmailDispatchError):
            await sender.send("user@example.com", "Subject", "<p>Hi</p>", "Hi")

    mock_send.assert_not_called()

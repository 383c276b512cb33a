"""
Integration tests for POST /auth/password-reset/request
"""
import hashlib
import re
from datetime import timedelta

import pytest
from sqlmodel import select

from src.app.errors import EmailDispatchError
from src.app.use_cases.auth import GENERIC_MESSAGE, PasswordResetPolicy
from src.depends import get_password_reset_policy
from src.domain.base import utcnow
from src.domain.entities import PasswordResetToken

URL = "/auth/password-reset/request"


def extract_token(mail: dict) -> str:
    match = re.search(r"token=([0-9a-f]{64})\b", mail["text"])
    assert match is not None
    return match.group(1)


async def stored_tokens(db_session, user_id):
    result = await db_session.exec(
        select(PasswordResetToken).where(PasswordResetToken.user_id == user_id)
    )
    return result.all()


@pytest.mark.asyncio
async def test_request_reset_end_to_end(client, db_session, email_sender, user_id):
    before = utcnow()
    response = await client.post(URL, json={"email": "user@example.com"})

    assert response.status_code == 200
    assert response.json() == {"message": GENERIC_MESSAGE}

    assert len(email_sender.sent) == 1
    mail = email_sender.sent[0]
    assert mail["to"] == "user@example.com"
    raw_token = extract_token(mail)

    tokens = await stored_tokens(db_session, user_id)
    assert len(tokens) == 1
    token = tokens[0]
    assert token.token_hash == hashlib.sha256(raw_token.encode()).hexdigest()
    assert token.token_hash != raw_token
    assert token.used_at is None
    expected = before + timedelta(minutes=15)
    assert expected <= token.expires_at <= utcnow() + timedelta(minutes=15)


@pytest.mark.asyncio
async def test_email_lookup_is_case_insensitive(client, db_session, email_sender, user_id):
    response = await client.post(URL, json={"email": "USER@Example.com"})

    assert response.status_code == 200
    assert len(email_sender.sent) == 1
    assert len(await stored_tokens(db_session, user_id)) == 1


@pytest.mark.asyncio
async def test_second_request_replaces_first_token(client, db_session, email_sender, user_id):
    await client.post(URL, json={"email": "user@example.com"})
    await client.post(URL, json={"email": "user@example.com"})

    first, second = (extract_token(mail) for mail in email_sender.sent)
    assert first != second

    tokens = await stored_tokens(db_session, user_id)
    assert len(tokens) == 1
    assert tokens[0].token_hash == hashlib.sha256(second.encode()).hexdigest()

    stale = await client.get("/auth/password-reset/verify", params={"token": first})
    assert stale.status_code == 400


@pytest.mark.asyncio
async def test_unknown_email_is_indistinguishable(client, email_sender, user):
    known = await client.post(URL, json={"email": "user@example.com"})
    unknown = await client.post(URL, json={"email": "nobody@example.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.content == unknown.content
    assert len(email_sender.sent) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{}, {"email": ""}, {"email": "not-an-email"}])
async def test_invalid_email_rejected(client, email_sender, payload):
    response = await client.post(URL, json=payload)

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert email_sender.sent == []


@pytest.mark.asyncio
async def test_fourth_request_is_rate_limited(client, email_sender, user):
    for _ in range(3):
        response = await client.post(URL, json={"email": "user@example.com"})
        assert response.status_code == 200

    response = await client.post(URL, json={"email": "user@example.com"})

    assert response.status_code == 429
    body = response.json()
    assert body["code"] == "RATE_LIMITED"
    assert body["retryAt"].endswith("Z")
    assert len(email_sender.sent) == 3


@pytest.mark.asyncio
async def test_rate_limit_applies_to_unknown_emails(client):
    for _ in range(3):
        await client.post(URL, json={"email": "ghost@example.com"})

    response = await client.post(URL, json={"email": "ghost@example.com"})

    assert response.status_code == 429


@pytest.mark.asyncio
async def test_per_email_limit_spans_client_origins(client, user):
    for idx in range(3):
        response = await client.post(
            URL,
            json={"email": "user@example.com"},
            headers={"X-Forwarded-For": f"198.51.100.{idx}"},
        )
        assert response.status_code == 200

    response = await client.post(
        URL, json={"email": "user@example.com"}, headers={"X-Forwarded-For": "198.51.100.99"}
    )

    assert response.status_code == 429


@pytest.mark.asyncio
async def test_per_origin_limit_uses_first_forwarded_hop(app, client, email_sender, user):
    app.dependency_overrides[get_password_reset_policy] = lambda: PasswordResetPolicy(
        max_per_email=10, max_per_origin_email=1
    )
    headers = {"X-Forwarded-For": "203.0.113.5, 10.0.0.1"}

    first = await client.post(URL, json={"email": "user@example.com"}, headers=headers)
    second = await client.post(
        URL, json={"email": "user@example.com"}, headers={"X-Forwarded-For": "203.0.113.5"}
    )
    other_origin = await client.post(
        URL, json={"email": "user@example.com"}, headers={"X-Forwarded-For": "203.0.113.6"}
    )

    assert first.status_code == 200
    assert second.status_code == 429
    assert other_origin.status_code == 200
    assert len(email_sender.sent) == 2


@pytest.mark.asyncio
async def test_email_failure_still_returns_generic_message(client, email_sender, db_session, user_id):
    async def failing_send(*args, **kwargs):
        raise EmailDispatchError("smtp down")

    email_sender.send = failing_send

    response = await client.post(URL, json={"email": "user@example.com"})

    assert response.status_code == 200
    assert response.json() == {"message": GENERIC_MESSAGE}
    assert len(await stored_tokens(db_session, user_id)) == 1

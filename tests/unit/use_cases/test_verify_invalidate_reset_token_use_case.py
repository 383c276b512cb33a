"""
Unit tests for VerifyResetTokenUseCase and InvalidateResetTokenUseCase
"""
from datetime import timedelta
from uuid import uuid4

import pytest

from src.app.use_cases.auth import InvalidateResetTokenUseCase, VerifyResetTokenUseCase
from src.app.use_cases.auth.reset_tokens import generate_reset_token, hash_reset_token
from src.domain.base import utcnow
from src.domain.entities import PasswordResetToken


@pytest.fixture
def issued(mock_uow):
    raw_token, token_hash = generate_reset_token()
    token = PasswordResetToken(
        id=uuid4(),
        user_id=uuid4(),
        token_hash=token_hash,
        expires_at=utcnow() + timedelta(minutes=15),
    )

    async def get_by_token_hash(value):
        return token if value == token_hash else None

    mock_uow.password_reset_tokens.get_by_token_hash.side_effect = get_by_token_hash
    return raw_token, token


def test_generated_token_is_64_hex_chars_and_hash_differs():
    raw_token, token_hash = generate_reset_token()

    assert len(raw_token) == 64
    int(raw_token, 16)
    assert token_hash == hash_reset_token(raw_token)
    assert token_hash != raw_token


def test_generated_tokens_are_unique():
    tokens = {generate_reset_token()[0] for _ in range(100)}
    assert len(tokens) == 100


@pytest.mark.asyncio
async def test_verify_valid_token(mock_uow, issued):
    raw_token, _ = issued

    result = await VerifyResetTokenUseCase(mock_uow).execute(raw_token)

    assert result.is_ok()
    assert result.value.valid is True
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_verify_looks_up_by_digest_not_raw_token(mock_uow, issued):
    raw_token, token = issued

    await VerifyResetTokenUseCase(mock_uow).execute(raw_token)

    mock_uow.password_reset_tokens.get_by_token_hash.assert_awaited_once_with(token.token_hash)


@pytest.mark.asyncio
async def test_verify_expired_token(mock_uow, issued):
    raw_token, token = issued
    token.expires_at = utcnow() - timedelta(minutes=1)

    result = await VerifyResetTokenUseCase(mock_uow).execute(raw_token)

    assert result.is_err()
    assert result.error.code == "TOKEN_EXPIRED"


@pytest.mark.asyncio
async def test_verify_unknown_token(mock_uow, issued):
    result = await VerifyResetTokenUseCase(mock_uow).execute("not-a-token")

    assert result.is_err()
    assert result.error.code == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_invalidate_marks_token_used(mock_uow, issued):
    raw_token, token = issued

    result = await InvalidateResetTokenUseCase(mock_uow).execute(raw_token)

    assert result.is_ok()
    assert token.used_at is not None
    mock_uow.password_reset_tokens.update.assert_awaited_once_with(token)
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_invalidated_token_no_longer_verifies(mock_uow, issued):
    raw_token, _ = issued

    await InvalidateResetTokenUseCase(mock_uow).execute(raw_token)
    result = await VerifyResetTokenUseCase(mock_uow).execute(raw_token)

    assert result.is_err()
    assert result.error.code == "TOKEN_ALREADY_USED"


@pytest.mark.asyncio
async def test_invalidate_twice_fails(mock_uow, issued):
    raw_token, _ = issued
    use_case = InvalidateResetTokenUseCase(mock_uow)

    await use_case.execute(raw_token)
    result = await use_case.execute(raw_token)

    assert result.is_err()
    assert result.error.code == "TOKEN_ALREADY_USED"
    assert mock_uow.commit.await_count == 1

"""
Authentication Use Cases

Password reset lifecycle: request, verify, confirm, invalidate, sweep.
"""

from .request_password_reset_use_case import (
    GENERIC_MESSAGE,
    PasswordResetPolicy,
    RequestPasswordResetUseCase,
)
from .verify_reset_token_use_case import VerifyResetTokenUseCase
from .confirm_password_reset_use_case import ConfirmPasswordResetUseCase
from .invalidate_reset_token_use_case import InvalidateResetTokenUseCase
from .cleanup_expired_reset_tokens_use_case import CleanupExpiredResetTokensUseCase
from .dtos import (
    RequestPasswordResetCommand,
    PasswordResetMessageResponse,
    VerifyResetTokenResponse,
    CleanupExpiredTokensResponse,
)

__all__ = [
    # Use Cases
    "RequestPasswordResetUseCase",
    "VerifyResetTokenUseCase",
    "ConfirmPasswordResetUseCase",
    "InvalidateResetTokenUseCase",
    "CleanupExpiredResetTokensUseCase",
    "PasswordResetPolicy",
    "GENERIC_MESSAGE",
    # DTOs - Commands
    "RequestPasswordResetCommand",
    # DTOs - Responses
    "PasswordResetMessageResponse",
    "VerifyResetTokenResponse",
    "CleanupExpiredTokensResponse",
]

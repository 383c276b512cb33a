"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the password reset flow.
Provides type safety and clear contracts between layers.
"""

from pydantic import BaseModel


# ============================================================================
# Command DTOs
# ============================================================================


class RequestPasswordResetCommand(BaseModel):
    """Intent to start a password reset for an email, from a client origin"""

    email: str
    client_origin: str = "unknown"


# ============================================================================
# Response DTOs
# ============================================================================


class PasswordResetMessageResponse(BaseModel):
    """Plain message response used by request, confirm and invalidate"""

    message: str


class VerifyResetTokenResponse(BaseModel):
    """Response for reset token verification"""

    valid: bool
    message: str


class CleanupExpiredTokensResponse(BaseModel):
    """Response for the expired token sweep"""

    message: str
    deleted: int

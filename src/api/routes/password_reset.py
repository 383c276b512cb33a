from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import ClientError, ServerError
from src.api.utils.admin_auth import verify_admin_api_key
from src.api.utils.client_origin import get_client_origin
from src.app.services.email_sender import IEmailSender
from src.app.services.rate_limiter import RateLimiter
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    CleanupExpiredResetTokensUseCase,
    CleanupExpiredTokensResponse,
    ConfirmPasswordResetUseCase,
    InvalidateResetTokenUseCase,
    PasswordResetMessageResponse,
    PasswordResetPolicy,
    RequestPasswordResetCommand,
    RequestPasswordResetUseCase,
    VerifyResetTokenResponse,
    VerifyResetTokenUseCase,
)
from src.depends import (
    get_email_sender,
    get_password_reset_policy,
    get_rate_limiter,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth/password-reset", tags=["Password Reset"])

TOKEN_ERROR_CODES = ("INVALID_TOKEN", "TOKEN_EXPIRED", "TOKEN_ALREADY_USED")


class RequestPasswordResetRequest(BaseModel):
    """
    Request password reset HTTP request payload

    Validates incoming password reset request.
    """

    email: EmailStr = Field(..., description="User email address")


@router.post(
    "/request", status_code=status.HTTP_200_OK, response_model=PasswordResetMessageResponse
)
async def request_password_reset(
    request: RequestPasswordResetRequest,
    http_request: Request,
    background_tasks: BackgroundTasks,
    uow: UnitOfWork = Depends(get_unit_of_work),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    email_sender: IEmailSender = Depends(get_email_sender),
    policy: PasswordResetPolicy = Depends(get_password_reset_policy),
):
    """
    Request Password Reset

    Issues a 15-minute reset token and emails a link containing it.

    Security:
        - No email enumeration (same response for known and unknown emails)
        - Rate limited per email and per (client origin, email)
        - Only the SHA-256 digest of the token is stored
        - Email is sent in a background task after the response

    Returns:
        - 200 OK: Always the same message once rate limits pass
        - 400 Bad Request: Invalid email
        - 429 Too Many Requests: Rate limited (retryAt in body)
        - 500 Internal Server Error: Token store failure, only when
          PASSWORD_RESET_SURFACE_STORE_ERRORS is enabled
    """
    command = RequestPasswordResetCommand(
        email=request.email, client_origin=get_client_origin(http_request)
    )

    use_case = RequestPasswordResetUseCase(
        uow, rate_limiter, email_sender, policy, schedule=background_tasks.add_task
    )
    result = await use_case.execute(command)

    # Handle errors
    if result.is_err():
        error = result.error
        if error.code == "RATE_LIMITED":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    return result.value


@router.delete(
    "/cleanup",
    status_code=status.HTTP_200_OK,
    response_model=CleanupExpiredTokensResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def cleanup_expired_tokens(uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Cleanup Expired Reset Tokens

    Operator/cron endpoint that deletes every expired reset token.

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 500 Internal Server Error: Storage error
    """
    use_case = CleanupExpiredResetTokensUseCase(uow)
    result = await use_case.execute()

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.get("/verify", status_code=status.HTTP_200_OK, response_model=VerifyResetTokenResponse)
async def verify_reset_token(
    token: str = Query(..., min_length=1, description="Password reset token from email"),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Verify Reset Token

    Lets the reset page check a link before showing the password form.

    Raises:
        - 400 Bad Request: Invalid, expired or already used token
    """
    use_case = VerifyResetTokenUseCase(uow)
    result = await use_case.execute(token)

    if result.is_err():
        error = result.error
        if error.code in TOKEN_ERROR_CODES:
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


class ConfirmPasswordResetRequest(BaseModel):
    """
    Confirm password reset HTTP request payload

    Complexity rules are checked by the use case so the caller gets one
    consistent message.
    """

    token: str = Field(..., min_length=1, description="Password reset token from email")
    password: str = Field(..., description="New password")


@router.post(
    "/confirm", status_code=status.HTTP_200_OK, response_model=PasswordResetMessageResponse
)
async def confirm_password_reset(
    request: ConfirmPasswordResetRequest, uow: UnitOfWork = Depends(get_unit_of_work)
):
    """
    Confirm Password Reset

    Validates the reset token and updates the user password. Every reset
    token of the user is deleted afterwards.

    Raises:
        - 400 Bad Request: Invalid/expired/used token, or weak password
        - 404 Not Found: Token owner no longer exists
        - 500 Internal Server Error: Server error
    """
    use_case = ConfirmPasswordResetUseCase(uow)
    result = await use_case.execute(request.token, request.password)

    if result.is_err():
        error = result.error
        if error.code in TOKEN_ERROR_CODES or error.code == "INVALID_PASSWORD":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


class InvalidateResetTokenRequest(BaseModel):
    token: str = Field(..., min_length=1, description="Password reset token from email")


@router.post(
    "/invalidate", status_code=status.HTTP_200_OK, response_model=PasswordResetMessageResponse
)
async def invalidate_reset_token(
    request: InvalidateResetTokenRequest, uow: UnitOfWork = Depends(get_unit_of_work)
):
    """
    Invalidate Reset Token

    For "this wasn't me" links: burns the token without changing the password.

    Raises:
        - 400 Bad Request: Invalid, expired or already used token
    """
    use_case = InvalidateResetTokenUseCase(uow)
    result = await use_case.execute(request.token)

    if result.is_err():
        error = result.error
        if error.code in TOKEN_ERROR_CODES:
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value

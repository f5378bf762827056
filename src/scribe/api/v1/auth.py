"""Authentication endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from src.scribe.api.dependencies import CurrentAuth, IdentityServiceDep, OAuthProviders
from src.scribe.core.exceptions import NotFound
from src.scribe.models import OAuthProviderName
from src.scribe.schemas.auth import (
    AccessTokenResponse,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    OAuthLoginResponse,
    RefreshRequest,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
    VerifyEmailRequest,
)
from src.scribe.schemas.user import UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"description": "Email already registered"},
        422: {"description": "Validation error or weak password"},
    },
)
async def register(register_data: RegisterRequest, service: IdentityServiceDep) -> RegisterResponse:
    """Create an account and email a verification code.

    The response already carries a token pair; workspace routes stay closed
    until the email is verified.
    """
    result = await service.register(
        first_name=register_data.first_name,
        last_name=register_data.last_name,
        email=register_data.email,
        password=register_data.password,
        mobile_number=register_data.mobile_number,
    )
    return RegisterResponse(
        user=UserRead.model_validate(result.user),
        access_token=result.tokens.access_token,
        refresh_token=result.tokens.refresh_token,
        verification_email_sent=result.verification_email_sent,
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"description": "Invalid credentials"}},
)
async def login(login_data: LoginRequest, service: IdentityServiceDep) -> LoginResponse:
    """Authenticate with email and password."""
    user, tokens = await service.login(login_data.email, login_data.password)
    return LoginResponse(
        user=UserRead.model_validate(user),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )


@router.post(
    "/refresh",
    response_model=AccessTokenResponse,
    responses={401: {"description": "Invalid or expired refresh token"}},
)
async def refresh(refresh_data: RefreshRequest, service: IdentityServiceDep) -> AccessTokenResponse:
    """Exchange a refresh token for a new access token."""
    access_token = await service.refresh(refresh_data.refresh_token)
    return AccessTokenResponse(access_token=access_token)


@router.get("/me", response_model=UserRead)
async def me(auth: CurrentAuth) -> UserRead:
    return UserRead.model_validate(auth.user)


@router.post(
    "/verify-email",
    response_model=MessageResponse,
    responses={400: {"description": "Invalid or expired code"}},
)
async def verify_email(
    verify_data: VerifyEmailRequest,
    auth: CurrentAuth,
    service: IdentityServiceDep,
) -> MessageResponse:
    """Verify the caller's email address with the emailed code."""
    await service.verify_email(auth.user_id, verify_data.code)
    return MessageResponse(message="Email verified successfully")


@router.post(
    "/resend-verification",
    response_model=MessageResponse,
    responses={409: {"description": "Email already verified"}},
)
async def resend_verification(auth: CurrentAuth, service: IdentityServiceDep) -> MessageResponse:
    """Send a fresh verification code; the previous one stops working."""
    sent = await service.resend_verification(auth.user_id)
    if not sent:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Verification email could not be sent. Please try again later.",
        )
    return MessageResponse(message="Verification code sent")


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    forgot_data: ForgotPasswordRequest, service: IdentityServiceDep
) -> MessageResponse:
    """Request a password reset link.

    Always returns success to prevent email enumeration.
    """
    await service.request_password_reset(forgot_data.email)
    return MessageResponse(
        message="If an account exists with this email, a password reset link has been sent"
    )


@router.post(
    "/reset-password/{token}",
    response_model=MessageResponse,
    responses={400: {"description": "Invalid or expired token"}},
)
async def reset_password(
    token: str,
    reset_data: ResetPasswordRequest,
    service: IdentityServiceDep,
) -> MessageResponse:
    await service.reset_password(token, reset_data.password)
    return MessageResponse(message="Password has been reset")


@router.get(
    "/{provider}/callback",
    response_model=OAuthLoginResponse,
    responses={
        401: {"description": "OAuth sign-in failed"},
        404: {"description": "Provider not configured"},
    },
)
async def oauth_callback(
    provider: OAuthProviderName,
    providers: OAuthProviders,
    service: IdentityServiceDep,
    code: str = Query(min_length=1),
) -> OAuthLoginResponse:
    """Complete an OAuth sign-in with the provider's authorization code."""
    oauth_provider = providers.get(provider)
    if oauth_provider is None:
        raise NotFound(f"OAuth provider '{provider.value}' is not configured")

    profile = await oauth_provider.exchange_code(code)
    result = await service.login_with_oauth(provider, profile)
    return OAuthLoginResponse(
        user=UserRead.model_validate(result.user),
        access_token=result.tokens.access_token,
        refresh_token=result.tokens.refresh_token,
        created=result.created,
    )

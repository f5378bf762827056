"""Domain error taxonomy and exception handlers with request_id in responses.

Every ``ScribeError`` is an expected outcome: it carries a client-safe message
and an HTTP status. Anything else is an internal failure and is rendered as a
generic 500 without leaking details.
"""

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.scribe.core.logging import get_logger

logger = get_logger(__name__)


class ScribeError(Exception):
    """Base class for expected, client-facing failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request could not be processed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCredentials(ScribeError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class OAuthFailed(InvalidCredentials):
    """The identity provider rejected the code or returned an unusable profile."""

    default_message = "OAuth sign-in failed"


class DuplicateEmail(ScribeError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Email is already registered"


class InvalidToken(ScribeError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid or expired token"


class InvalidOrExpiredToken(InvalidToken):
    """A stored one-time secret (reset token, verification code) did not match."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid or expired token"


class InvalidOrExpiredInvite(InvalidToken):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Invalid or expired invitation"


class ValidationFailed(ScribeError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid value"


class InvalidStep(ValidationFailed):
    default_message = "Invalid step value"


class InvalidValue(ValidationFailed):
    default_message = "Invalid value"


class Forbidden(ScribeError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to perform this action"


class NotFound(ScribeError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class AlreadyMember(ScribeError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "User is already a member of this workspace"


class AlreadyVerified(ScribeError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Email is already verified"


class OnboardingCompleted(ScribeError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Onboarding has already been completed"


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(ScribeError)
    async def scribe_error_handler(request: Request, exc: ScribeError) -> JSONResponse:
        logger.info(
            "Request rejected",
            error=type(exc).__name__,
            status_code=exc.status_code,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.message,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )

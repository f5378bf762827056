"""Purpose-scoped signed tokens and one-time codes.

Every purpose signs with its own key, so a token minted for one operation
class never verifies for another even if the ``type`` claim were forged.
"""

import hmac
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from hashlib import sha256
from uuid import UUID, uuid4

from jose import JWTError, jwt

from src.scribe.core.config import Settings
from src.scribe.core.exceptions import InvalidToken
from src.scribe.core.security.crypto import hash_token
from src.scribe.models.base import utc_now


class TokenPurpose(str, Enum):
    """Operation class a token is valid for."""

    ACCESS = "access"
    REFRESH = "refresh"
    RESET = "reset"
    VERIFY = "verify"
    INVITE = "invite"


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


@dataclass(frozen=True)
class OneTimeCode:
    """A single-use secret and what gets persisted for it.

    ``value`` goes to the user (email body or link), ``stored_value`` goes to
    the owning record. For hashed purposes these differ.
    """

    value: str
    stored_value: str
    expires_at: datetime


VERIFICATION_CODE_DIGITS = 6


class TokenService:
    """Issues and verifies signed, time-bounded tokens.

    Constructed once at application startup and shared by reference.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def _signing_key(self, purpose: TokenPurpose) -> str:
        if purpose is TokenPurpose.ACCESS:
            return self.settings.jwt_secret_key
        if purpose is TokenPurpose.REFRESH and self.settings.jwt_refresh_secret_key:
            return self.settings.jwt_refresh_secret_key
        return hmac.new(
            self.settings.jwt_secret_key.encode(),
            f"scribe:{purpose.value}".encode(),
            sha256,
        ).hexdigest()

    def default_ttl(self, purpose: TokenPurpose) -> timedelta:
        ttls = {
            TokenPurpose.ACCESS: timedelta(minutes=self.settings.access_token_expire_minutes),
            TokenPurpose.REFRESH: timedelta(days=self.settings.refresh_token_expire_days),
            TokenPurpose.VERIFY: timedelta(minutes=self.settings.email_verification_expire_minutes),
            TokenPurpose.RESET: timedelta(minutes=self.settings.password_reset_expire_minutes),
            TokenPurpose.INVITE: timedelta(days=self.settings.invite_expire_days),
        }
        return ttls[purpose]

    def issue(
        self,
        purpose: TokenPurpose,
        subject_id: str | UUID,
        ttl: timedelta | None = None,
    ) -> str:
        """Create a JWT binding ``purpose`` to ``subject_id``.

        Includes a unique JWT ID (jti) so two tokens minted in the same second
        for the same subject are still distinct.
        """
        now = datetime.now(UTC)
        expire = now + (ttl if ttl is not None else self.default_ttl(purpose))
        to_encode = {
            "sub": str(subject_id),
            "type": purpose.value,
            "iat": now,
            "exp": expire,
            "jti": uuid4().hex,
        }
        return jwt.encode(  # type: ignore[no-any-return]
            to_encode,
            self._signing_key(purpose),
            algorithm=self.settings.jwt_algorithm,
        )

    def verify(self, token: str, purpose: TokenPurpose) -> str:
        """Return the subject id of a valid token, or raise InvalidToken."""
        try:
            payload = jwt.decode(
                token,
                self._signing_key(purpose),
                algorithms=[self.settings.jwt_algorithm],
            )
        except JWTError as e:
            raise InvalidToken() from e

        if payload.get("type") != purpose.value:
            raise InvalidToken()

        subject = payload.get("sub")
        if not subject:
            raise InvalidToken()
        return str(subject)

    def issue_pair(self, subject_id: str | UUID) -> TokenPair:
        return TokenPair(
            access_token=self.issue(TokenPurpose.ACCESS, subject_id),
            refresh_token=self.issue(TokenPurpose.REFRESH, subject_id),
        )

    def issue_one_time_code(self, purpose: TokenPurpose) -> OneTimeCode:
        """Generate a single-use secret for a record-stored purpose.

        VERIFY produces a short decimal code stored as-is; RESET and INVITE
        produce high-entropy secrets stored as a SHA-256 digest.
        """
        expires_at = utc_now() + self.default_ttl(purpose)

        if purpose is TokenPurpose.VERIFY:
            low = 10 ** (VERIFICATION_CODE_DIGITS - 1)
            code = str(low + secrets.randbelow(9 * low))
            return OneTimeCode(value=code, stored_value=code, expires_at=expires_at)

        if purpose in (TokenPurpose.RESET, TokenPurpose.INVITE):
            secret = secrets.token_urlsafe(32)
            return OneTimeCode(value=secret, stored_value=hash_token(secret), expires_at=expires_at)

        raise ValueError(f"Purpose '{purpose.value}' has no one-time code form")

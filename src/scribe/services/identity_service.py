"""Identity service - credential login, OAuth reconciliation, registration and
the one-time-code flows (email verification, password reset).

Every path that resolves to a user ends at the same canonical ``users`` row:
an email or a linked ``(provider, provider_id)`` pair never maps to two accounts.
"""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.scribe.core.exceptions import (
    AlreadyVerified,
    DuplicateEmail,
    InvalidCredentials,
    InvalidOrExpiredToken,
    InvalidToken,
    NotFound,
    OAuthFailed,
)
from src.scribe.core.logging import get_logger
from src.scribe.core.notifications import MailKind, Mailer
from src.scribe.core.oauth import OAuthProfile
from src.scribe.core.security import (
    DUMMY_PASSWORD_HASH,
    TokenPair,
    TokenPurpose,
    TokenService,
    hash_password,
    hash_token,
    verify_password,
)
from src.scribe.models import (
    OAuthProviderName,
    User,
    UserIdentity,
    new_oauth_user,
    new_user,
    normalize_email,
)
from src.scribe.repositories import UserRepository, WorkspaceMemberRepository

logger = get_logger(__name__)


@dataclass
class RegistrationResult:
    user: User
    tokens: TokenPair
    verification_email_sent: bool


@dataclass
class OAuthLoginResult:
    user: User
    tokens: TokenPair
    created: bool


class IdentityService:
    """Resolves credentials and external identities to canonical users."""

    def __init__(
        self,
        user_repo: UserRepository,
        member_repo: WorkspaceMemberRepository,
        session: AsyncSession,
        token_service: TokenService,
        mailer: Mailer,
    ):
        self.user_repo = user_repo
        self.member_repo = member_repo
        self.session = session
        self.token_service = token_service
        self.mailer = mailer

    async def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        mobile_number: str | None = None,
    ) -> RegistrationResult:
        """Create an email/password account and send its verification code.

        1. Reject a taken email (the unique constraint covers the race)
        2. Create the user with a fresh verification code
        3. Bind pending workspace invitations addressed to the email
        4. COMMIT, then send the verification email

        Mail failure never fails registration; the result reports it.
        """
        email = normalize_email(email)
        if await self.user_repo.exists_by_email(email):
            raise DuplicateEmail()

        user = new_user(email, password, first_name, last_name, mobile_number)
        code = self.token_service.issue_one_time_code(TokenPurpose.VERIFY)
        user.verification_code = code.stored_value
        user.verification_expires_at = code.expires_at

        try:
            self.user_repo.add(user)
            await self.session.flush()
            bound = await self.member_repo.bind_email_to_user(user.email, user.id)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateEmail() from e
        except Exception:
            await self.session.rollback()
            raise

        logger.info("User registered", user_id=str(user.id), bound_invitations=bound)

        sent = await self.mailer.send(
            MailKind.VERIFY_EMAIL,
            user.email,
            {"name": user.first_name, "code": code.value},
        )
        if not sent:
            logger.warning("Verification email not delivered", user_id=str(user.id))

        return RegistrationResult(
            user=user,
            tokens=self.token_service.issue_pair(user.id),
            verification_email_sent=sent,
        )

    async def login(self, email: str, password: str) -> tuple[User, TokenPair]:
        """Authenticate an email/password pair.

        Raises InvalidCredentials for unknown emails, OAuth-only accounts and
        wrong passwords alike.
        """
        user = await self.user_repo.get_by_email(normalize_email(email))

        # Always verify against some hash so timing does not reveal account existence
        password_hash = DUMMY_PASSWORD_HASH
        if user is not None and user.hashed_password:
            password_hash = user.hashed_password
        password_valid = verify_password(password, password_hash)

        if user is None or not user.hashed_password or not password_valid:
            raise InvalidCredentials()

        try:
            await self.user_repo.record_login(user.id)
            await self.session.commit()
            await self.session.refresh(user)
        except Exception:
            await self.session.rollback()
            raise

        logger.info("User logged in", user_id=str(user.id))
        return user, self.token_service.issue_pair(user.id)

    async def login_with_oauth(
        self, provider: OAuthProviderName, profile: OAuthProfile
    ) -> OAuthLoginResult:
        """Resolve an external identity to a canonical user, creating one if needed.

        Lookup order: linked identity, then email. A user found by email gets
        the link attached unless it already links a different id for this
        provider. New users start verified and password-less.
        """
        email = normalize_email(profile.email)
        created = False

        try:
            user = await self.user_repo.get_by_identity(provider, profile.provider_id)
            if user is None:
                user = await self.user_repo.get_by_email(email)
                if user is not None:
                    await self._link_identity(user, provider, profile.provider_id)
                    await self.session.commit()
                else:
                    user = await self._create_oauth_user(provider, profile, email)
                    created = user is not None
                    if user is None:
                        user = await self._resolve_oauth_race(provider, profile, email)

            await self.user_repo.record_login(user.id)
            await self.session.commit()
            await self.session.refresh(user)
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "OAuth login",
            user_id=str(user.id),
            provider=provider.value,
            created=created,
        )
        return OAuthLoginResult(
            user=user,
            tokens=self.token_service.issue_pair(user.id),
            created=created,
        )

    async def _link_identity(
        self, user: User, provider: OAuthProviderName, provider_id: str
    ) -> None:
        existing = await self.user_repo.get_identity(user.id, provider)
        if existing is None:
            self.user_repo.add_identity(
                UserIdentity(user_id=user.id, provider=provider.value, provider_id=provider_id)
            )
            await self.session.flush()
            logger.info("Identity linked", user_id=str(user.id), provider=provider.value)
        elif existing.provider_id != provider_id:
            raise OAuthFailed(f"This account is already linked to another {provider.value} login")

    async def _create_oauth_user(
        self, provider: OAuthProviderName, profile: OAuthProfile, email: str
    ) -> User | None:
        """Insert a new OAuth user; None when a concurrent insert won the race."""
        user, identity = new_oauth_user(
            provider, profile.provider_id, email, profile.given_name, profile.family_name
        )
        try:
            self.user_repo.add(user)
            await self.session.flush()
            self.user_repo.add_identity(identity)
            await self.session.flush()
            await self.member_repo.bind_email_to_user(user.email, user.id)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            return None

        logger.info("User registered", user_id=str(user.id), provider=provider.value)
        return user

    async def _resolve_oauth_race(
        self, provider: OAuthProviderName, profile: OAuthProfile, email: str
    ) -> User:
        user = await self.user_repo.get_by_identity(provider, profile.provider_id)
        if user is not None:
            return user
        user = await self.user_repo.get_by_email(email)
        if user is None:
            raise OAuthFailed()
        await self._link_identity(user, provider, profile.provider_id)
        await self.session.commit()
        return user

    async def verify_email(self, user_id: UUID, code: str) -> None:
        """Consume a verification code. A code works once, before it expires."""
        try:
            consumed = await self.user_repo.consume_verification_code(user_id, code.strip())
            if not consumed:
                raise InvalidOrExpiredToken()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Email verified", user_id=str(user_id))

    async def resend_verification(self, user_id: UUID) -> bool:
        """Issue a fresh verification code, replacing any previous one.

        Returns whether the email was delivered.
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFound("User not found")
        if user.email_verified:
            raise AlreadyVerified()

        code = self.token_service.issue_one_time_code(TokenPurpose.VERIFY)
        try:
            await self.user_repo.update_fields(
                user,
                verification_code=code.stored_value,
                verification_expires_at=code.expires_at,
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        return await self.mailer.send(
            MailKind.VERIFY_EMAIL,
            user.email,
            {"name": user.first_name, "code": code.value},
        )

    async def request_password_reset(self, email: str) -> None:
        """Store a reset secret and email the link when the account exists.

        Succeeds silently for unknown emails and on mail failure, so callers
        cannot probe which addresses are registered.
        """
        user = await self.user_repo.get_by_email(normalize_email(email))
        if user is None:
            logger.info("Password reset requested for unknown email")
            return

        reset = self.token_service.issue_one_time_code(TokenPurpose.RESET)
        try:
            await self.user_repo.update_fields(
                user,
                reset_token_hash=reset.stored_value,
                reset_expires_at=reset.expires_at,
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        sent = await self.mailer.send(
            MailKind.RESET_PASSWORD,
            user.email,
            {"name": user.first_name, "token": reset.value},
        )
        logger.info("Password reset requested", user_id=str(user.id), email_sent=sent)

    async def reset_password(self, token: str, new_password: str) -> None:
        """Set a new password if the reset secret is live; the secret is consumed."""
        new_hash = hash_password(new_password)
        try:
            consumed = await self.user_repo.consume_reset_token(hash_token(token), new_hash)
            if not consumed:
                raise InvalidOrExpiredToken()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Password reset completed")

    async def refresh(self, refresh_token: str) -> str:
        """Exchange a refresh token for a new access token."""
        user = await self._user_from_token(refresh_token, TokenPurpose.REFRESH)
        return self.token_service.issue(TokenPurpose.ACCESS, user.id)

    async def change_password(self, user_id: UUID, current_password: str, new_password: str) -> None:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFound("User not found")
        if not user.hashed_password or not verify_password(current_password, user.hashed_password):
            raise InvalidCredentials("Current password is incorrect")

        try:
            await self.user_repo.update_fields(user, hashed_password=hash_password(new_password))
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Password changed", user_id=str(user.id))

    async def authenticate_access_token(self, token: str) -> User:
        """Resolve a bearer access token to its user, or raise InvalidToken."""
        return await self._user_from_token(token, TokenPurpose.ACCESS)

    async def _user_from_token(self, token: str, purpose: TokenPurpose) -> User:
        subject = self.token_service.verify(token, purpose)
        try:
            user_id = UUID(subject)
        except ValueError as e:
            raise InvalidToken() from e

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise InvalidToken()
        return user

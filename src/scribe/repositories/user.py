"""Repository for User and UserIdentity entities."""

from typing import Any
from uuid import UUID

from sqlmodel import select, update

from src.scribe.models import OAuthProviderName, OnboardingStatus, User, UserIdentity
from src.scribe.models.base import utc_now
from src.scribe.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User entity.

    The ``consume_*`` and ``mark_*`` methods are single conditional UPDATEs.
    They return whether a row matched, so concurrent callers racing on the
    same secret or transition see exactly one success.
    """

    model = User

    async def get_by_email(self, email: str) -> User | None:
        """Get user by (already normalized) email address."""
        result = await self.session.execute(
            select(User).where(User.email == email).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str) -> bool:
        """Check if a user with the given email exists."""
        user = await self.get_by_email(email)
        return user is not None

    async def get_by_identity(self, provider: OAuthProviderName, provider_id: str) -> User | None:
        """Get the user linked to an external identity."""
        result = await self.session.execute(
            select(User)
            .join(UserIdentity, UserIdentity.user_id == User.id)  # type: ignore[arg-type]
            .where(
                UserIdentity.provider == provider.value,
                UserIdentity.provider_id == provider_id,
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_identity(self, user_id: UUID, provider: OAuthProviderName) -> UserIdentity | None:
        """Get a user's link for one provider, if any."""
        result = await self.session.execute(
            select(UserIdentity).where(
                UserIdentity.user_id == user_id,
                UserIdentity.provider == provider.value,
            )
        )
        return result.scalar_one_or_none()

    def add_identity(self, identity: UserIdentity) -> None:
        """Add identity link to session (no flush/commit)."""
        self.session.add(identity)

    async def consume_verification_code(self, user_id: UUID, code: str) -> bool:
        """Mark the email verified if ``code`` matches and is unexpired, clearing it."""
        now = utc_now()
        result = await self.session.execute(
            update(User)
            .where(User.id == user_id)  # type: ignore[arg-type]
            .where(User.verification_code == code)  # type: ignore[arg-type]
            .where(User.verification_expires_at > now)  # type: ignore[arg-type, operator]
            .values(
                email_verified=True,
                email_verified_at=now,
                verification_code=None,
                verification_expires_at=None,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        return (result.rowcount or 0) == 1  # type: ignore[attr-defined]

    async def consume_reset_token(self, token_hash: str, hashed_password: str) -> bool:
        """Swap in a new password hash if the reset token is live, clearing the token."""
        now = utc_now()
        result = await self.session.execute(
            update(User)
            .where(User.reset_token_hash == token_hash)  # type: ignore[arg-type]
            .where(User.reset_expires_at > now)  # type: ignore[arg-type, operator]
            .values(
                hashed_password=hashed_password,
                reset_token_hash=None,
                reset_expires_at=None,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        return (result.rowcount or 0) == 1  # type: ignore[attr-defined]

    async def mark_onboarding_completed(self, user_id: UUID) -> bool:
        """Flip onboarding from incomplete to completed; False if already completed."""
        result = await self.session.execute(
            update(User)
            .where(User.id == user_id)  # type: ignore[arg-type]
            .where(User.onboarding_status == OnboardingStatus.INCOMPLETE.value)  # type: ignore[arg-type]
            .values(
                onboarding_status=OnboardingStatus.COMPLETED.value,
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        return (result.rowcount or 0) == 1  # type: ignore[attr-defined]

    async def record_login(self, user_id: UUID) -> None:
        """Stamp the last successful login."""
        await self.session.execute(
            update(User)
            .where(User.id == user_id)  # type: ignore[arg-type]
            .values(last_login_at=utc_now())
            .execution_options(synchronize_session=False)
        )

    async def update_fields(self, user: User, **fields: Any) -> User:
        """Assign fields on a loaded user and flush."""
        for key, value in fields.items():
            setattr(user, key, value)
        user.updated_at = utc_now()
        self.session.add(user)
        await self.session.flush()
        return user

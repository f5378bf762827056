"""User models - credentials, verification secrets and external identity links."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, SQLModel

from src.scribe.core.security.crypto import hash_password
from src.scribe.models.base import utc_now
from src.scribe.models.enums import OAuthProviderName, OnboardingStatus


class User(SQLModel, table=True):
    """Canonical account record."""

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True)
    hashed_password: str | None = Field(default=None, max_length=255)
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)
    mobile_number: str | None = Field(default=None, max_length=32)

    email_verified: bool = Field(default=False)
    email_verified_at: datetime | None = Field(default=None)
    verification_code: str | None = Field(default=None, max_length=16)
    verification_expires_at: datetime | None = Field(default=None)
    reset_token_hash: str | None = Field(default=None, max_length=255, index=True)
    reset_expires_at: datetime | None = Field(default=None)

    onboarding_status: str = Field(default=OnboardingStatus.INCOMPLETE.value, max_length=20)
    onboarding_step: int = Field(default=1)
    onboarding_data: dict[str, Any] = Field(
        default_factory=dict, sa_column=Column(JSON, nullable=False)
    )
    preferences: dict[str, Any] = Field(
        default_factory=dict, sa_column=Column(JSON, nullable=False)
    )

    last_login_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def has_password(self) -> bool:
        return bool(self.hashed_password)


class UserIdentity(SQLModel, table=True):
    """Link between a user and an external identity provider account."""

    __tablename__ = "user_identities"
    __table_args__ = (
        UniqueConstraint("provider", "provider_id", name="uq_identity_provider_id"),
        UniqueConstraint("user_id", "provider", name="uq_identity_user_provider"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)
    provider: str = Field(max_length=50)
    provider_id: str = Field(max_length=255)
    created_at: datetime = Field(default_factory=utc_now)


def normalize_email(email: str) -> str:
    """Emails are unique case-insensitively; store them lowercased and trimmed."""
    return email.strip().lower()


def new_user(
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    mobile_number: str | None = None,
) -> User:
    """Build an email/password user with the password already hashed."""
    return User(
        email=normalize_email(email),
        hashed_password=hash_password(password),
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        mobile_number=mobile_number,
    )


def new_oauth_user(
    provider: OAuthProviderName,
    provider_id: str,
    email: str,
    given_name: str | None,
    family_name: str | None,
) -> tuple[User, UserIdentity]:
    """Build a password-less user plus its identity link.

    The provider has already verified the address, so the account starts verified.
    """
    user = User(
        email=normalize_email(email),
        first_name=(given_name or "").strip(),
        last_name=(family_name or "").strip(),
        email_verified=True,
        email_verified_at=utc_now(),
    )
    identity = UserIdentity(user_id=user.id, provider=provider.value, provider_id=provider_id)
    return user, identity

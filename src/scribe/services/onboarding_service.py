"""Onboarding service - the guided setup a new user walks through.

Answers are collected in ``User.onboarding_data`` step by step; completing
onboarding turns them into the user's first workspace.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar
from urllib.parse import urlparse
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.scribe.core.config import get_settings
from src.scribe.core.exceptions import InvalidStep, InvalidValue, NotFound, OnboardingCompleted
from src.scribe.core.logging import get_logger
from src.scribe.models import (
    Language,
    OnboardingStatus,
    PostStyle,
    Theme,
    User,
    Workspace,
    WorkspaceType,
    new_workspace,
)
from src.scribe.repositories import UserRepository, WorkspaceMemberRepository, WorkspaceRepository

logger = get_logger(__name__)

MIN_POST_FREQUENCY = 1
MAX_POST_FREQUENCY = 30
MAX_INSPIRATION_PROFILES = 10
MAX_INSPIRATION_PROFILE_LENGTH = 255
MAX_PREFERENCE_KEY_LENGTH = 64

EnumType = TypeVar("EnumType", bound=Enum)


@dataclass
class OnboardingState:
    status: OnboardingStatus
    step: int
    total_steps: int
    data: dict[str, Any]

    @property
    def completed(self) -> bool:
        return self.status is OnboardingStatus.COMPLETED


def parse_choice(enum_type: type[EnumType], value: Any, field: str) -> EnumType:
    """Coerce ``value`` into ``enum_type`` or raise InvalidValue naming the choices."""
    try:
        return enum_type(value)
    except ValueError:
        choices = ", ".join(str(member.value) for member in enum_type)
        raise InvalidValue(f"Invalid {field}. Must be one of: {choices}") from None


def validate_website_link(value: str | None) -> str:
    """Empty, or an absolute http(s) URL with a host."""
    link = (value or "").strip()
    if not link:
        return ""
    parsed = urlparse(link)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidValue("Website link must be an http(s) URL")
    return link


def validate_inspiration_profiles(value: Any) -> list[str]:
    if not isinstance(value, list):
        raise InvalidValue("Inspiration profiles must be a list")
    if len(value) > MAX_INSPIRATION_PROFILES:
        raise InvalidValue(f"At most {MAX_INSPIRATION_PROFILES} inspiration profiles are allowed")

    profiles: list[str] = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise InvalidValue("Inspiration profiles must be non-empty strings")
        if len(item) > MAX_INSPIRATION_PROFILE_LENGTH:
            raise InvalidValue("Inspiration profile is too long")
        profiles.append(item.strip())
    return profiles


class OnboardingService:
    """Service for onboarding progression and user preferences."""

    def __init__(
        self,
        user_repo: UserRepository,
        workspace_repo: WorkspaceRepository,
        member_repo: WorkspaceMemberRepository,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.workspace_repo = workspace_repo
        self.member_repo = member_repo
        self.session = session
        self.total_steps = get_settings().onboarding_total_steps

    async def _get_user(self, user_id: UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def _state(self, user: User) -> OnboardingState:
        return OnboardingState(
            status=OnboardingStatus(user.onboarding_status),
            step=user.onboarding_step,
            total_steps=self.total_steps,
            data=dict(user.onboarding_data or {}),
        )

    async def _save(self, user: User, **fields: Any) -> OnboardingState:
        try:
            await self.user_repo.update_fields(user, **fields)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return self._state(user)

    async def _store_answer(self, user_id: UUID, key: str, value: Any) -> OnboardingState:
        user = await self._get_user(user_id)
        data = {**(user.onboarding_data or {}), key: value}
        state = await self._save(user, onboarding_data=data)
        logger.debug("Onboarding answer stored", user_id=str(user_id), field=key)
        return state

    async def get_status(self, user_id: UUID) -> OnboardingState:
        return self._state(await self._get_user(user_id))

    async def update_step(self, user_id: UUID, step: Any) -> OnboardingState:
        """Move to any step in ``1..total_steps``; moving backwards is allowed."""
        if isinstance(step, bool) or not isinstance(step, int):
            raise InvalidStep()
        if not 1 <= step <= self.total_steps:
            raise InvalidStep(f"Step must be between 1 and {self.total_steps}")

        user = await self._get_user(user_id)
        return await self._save(user, onboarding_step=step)

    async def set_workspace_type(self, user_id: UUID, value: Any) -> OnboardingState:
        workspace_type = parse_choice(WorkspaceType, value, "workspace type")
        return await self._store_answer(user_id, "workspace_type", workspace_type.value)

    async def set_theme(self, user_id: UUID, value: Any) -> OnboardingState:
        theme = parse_choice(Theme, value, "theme")
        return await self._store_answer(user_id, "theme", theme.value)

    async def set_post_style(self, user_id: UUID, value: Any) -> OnboardingState:
        post_style = parse_choice(PostStyle, value, "post style")
        return await self._store_answer(user_id, "post_style", post_style.value)

    async def set_post_frequency(self, user_id: UUID, value: Any) -> OnboardingState:
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidValue("Post frequency must be a whole number")
        if not MIN_POST_FREQUENCY <= value <= MAX_POST_FREQUENCY:
            raise InvalidValue(
                f"Post frequency must be between {MIN_POST_FREQUENCY} and {MAX_POST_FREQUENCY}"
            )
        return await self._store_answer(user_id, "post_frequency", value)

    async def set_language(self, user_id: UUID, value: Any) -> OnboardingState:
        language = parse_choice(Language, value, "language")
        return await self._store_answer(user_id, "language", language.value)

    async def set_user_info(
        self,
        user_id: UUID,
        first_name: str | None,
        last_name: str | None,
        mobile_number: str | None = None,
    ) -> OnboardingState:
        """Update the user's own name and optional mobile number."""
        first = (first_name or "").strip()
        last = (last_name or "").strip()
        if not first or not last:
            raise InvalidValue("First name and last name are required")

        user = await self._get_user(user_id)
        mobile = (mobile_number or "").strip() or None
        return await self._save(user, first_name=first, last_name=last, mobile_number=mobile)

    async def set_website_link(self, user_id: UUID, value: str | None) -> OnboardingState:
        return await self._store_answer(user_id, "website_link", validate_website_link(value))

    async def set_inspiration_profiles(self, user_id: UUID, value: Any) -> OnboardingState:
        profiles = validate_inspiration_profiles(value)
        return await self._store_answer(user_id, "inspiration_profiles", profiles)

    async def complete_onboarding(self, user_id: UUID, workspace_name: str | None) -> Workspace:
        """Finish onboarding and create the user's first workspace.

        The status flip and the workspace insert share one transaction; the
        flip is conditional, so a second call raises OnboardingCompleted and
        never creates a second workspace.
        """
        name = (workspace_name or "").strip()
        if not name:
            raise InvalidValue("Workspace name is required")

        user = await self._get_user(user_id)
        if user.onboarding_status == OnboardingStatus.COMPLETED.value:
            raise OnboardingCompleted()

        data = user.onboarding_data or {}
        if "workspace_type" not in data:
            raise InvalidValue("Choose a workspace type before completing onboarding")

        workspace, owner_entry = new_workspace(
            owner_id=user.id,
            owner_email=user.email,
            name=name,
            workspace_type=WorkspaceType(data["workspace_type"]),
            preferred_theme=Theme(data.get("theme", Theme.LIGHT.value)),
            default_post_style=PostStyle(data.get("post_style", PostStyle.STANDARD.value)),
            default_language=Language(data.get("language", Language.ENGLISH.value)),
        )

        try:
            if not await self.user_repo.mark_onboarding_completed(user.id):
                raise OnboardingCompleted()
            self.workspace_repo.add(workspace)
            if owner_entry is not None:
                await self.session.flush()
                self.member_repo.add(owner_entry)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Onboarding completed",
            user_id=str(user.id),
            workspace_id=str(workspace.id),
        )
        return workspace

    async def update_preference(self, user_id: UUID, key: str, value: Any) -> dict[str, Any]:
        """Store a free-form preference on the user record."""
        key = key.strip()
        if not key or len(key) > MAX_PREFERENCE_KEY_LENGTH:
            raise InvalidValue("Invalid preference key")

        user = await self._get_user(user_id)
        preferences = {**(user.preferences or {}), key: value}
        await self._save(user, preferences=preferences)
        return preferences

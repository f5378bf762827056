"""User profile, password and preference endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path

from src.scribe.api.dependencies import (
    CurrentAuth,
    IdentityServiceDep,
    OnboardingServiceDep,
    UserServiceDep,
)
from src.scribe.schemas.auth import ChangePasswordRequest, MessageResponse
from src.scribe.schemas.user import PreferencesRead, PreferenceUpdate, UserRead, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/profile", response_model=UserRead)
async def get_profile(auth: CurrentAuth) -> UserRead:
    return UserRead.model_validate(auth.user)


@router.patch("/profile", response_model=UserRead)
async def update_profile(
    data: UserUpdate, auth: CurrentAuth, service: UserServiceDep
) -> UserRead:
    user = await service.update_profile(auth.user, data)
    return UserRead.model_validate(user)


@router.put(
    "/password",
    response_model=MessageResponse,
    responses={401: {"description": "Current password is incorrect"}},
)
async def change_password(
    data: ChangePasswordRequest,
    auth: CurrentAuth,
    service: IdentityServiceDep,
) -> MessageResponse:
    """Change password. OAuth-only accounts have no password to change."""
    await service.change_password(auth.user_id, data.current_password, data.new_password)
    return MessageResponse(message="Password updated")


@router.put("/preferences/{key}", response_model=PreferencesRead)
async def update_preference(
    key: Annotated[str, Path(min_length=1, max_length=64)],
    data: PreferenceUpdate,
    auth: CurrentAuth,
    service: OnboardingServiceDep,
) -> PreferencesRead:
    preferences = await service.update_preference(auth.user_id, key, data.value)
    return PreferencesRead(preferences=preferences)

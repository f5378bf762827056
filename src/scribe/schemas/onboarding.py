"""Onboarding request bodies.

Choice fields are plain strings here; the onboarding service validates them
against their domains so rejections surface as InvalidValue.
"""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class OnboardingStatusRead(BaseModel):
    status: str
    step: int
    total_steps: int
    completed: bool
    data: dict[str, Any]


class StepUpdate(BaseModel):
    step: int


class WorkspaceTypeUpdate(BaseModel):
    workspace_type: str


class ThemeUpdate(BaseModel):
    theme: str


class PostStyleUpdate(BaseModel):
    post_style: str


class PostFrequencyUpdate(BaseModel):
    post_frequency: int


class LanguageUpdate(BaseModel):
    language: str


class UserInfoUpdate(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    mobile_number: str | None = None


class WebsiteLinkUpdate(BaseModel):
    website_link: str | None = Field(None, max_length=2048)


class InspirationProfilesUpdate(BaseModel):
    inspiration_profiles: list[str]


class CompleteOnboardingRequest(BaseModel):
    workspace_name: str | None = Field(None, max_length=100)


class CompleteOnboardingResponse(BaseModel):
    workspace_id: UUID
    message: str = "Onboarding completed"

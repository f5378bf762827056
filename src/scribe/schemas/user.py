from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class UserRead(BaseModel):
    id: UUID
    email: str
    first_name: str
    last_name: str
    mobile_number: str | None
    email_verified: bool
    has_password: bool
    onboarding_status: str
    onboarding_step: int
    preferences: dict[str, Any]
    last_login_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class UserUpdate(BaseModel):
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    mobile_number: str | None = Field(None, max_length=32)


class PreferenceUpdate(BaseModel):
    value: Any


class PreferencesRead(BaseModel):
    preferences: dict[str, Any]

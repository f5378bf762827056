from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from src.scribe.models import AccessLevel, Language, MemberRole, PostStyle, Theme, WorkspaceType


class WorkspaceCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    type: WorkspaceType
    preferred_theme: Theme = Theme.LIGHT
    default_post_style: PostStyle = PostStyle.STANDARD
    default_language: Language = Language.ENGLISH


class WorkspaceUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    preferred_theme: Theme | None = None
    default_post_style: PostStyle | None = None
    default_language: Language | None = None


class WorkspaceRead(BaseModel):
    id: UUID
    name: str
    type: str
    owner_id: UUID
    preferred_theme: str
    default_post_style: str
    default_language: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class WorkspaceDetail(WorkspaceRead):
    access_level: AccessLevel


class MemberRead(BaseModel):
    id: UUID
    workspace_id: UUID
    user_id: UUID | None
    email: str
    role: str
    invite_accepted: bool
    invited_by_user_id: UUID | None
    accepted_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class InviteRequest(BaseModel):
    email: EmailStr
    role: MemberRole


class InviteResponse(BaseModel):
    member: MemberRead
    email_sent: bool
    message: str = "Invitation sent"


class MemberRoleUpdate(BaseModel):
    role: MemberRole

"""Workspace and membership models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Index, text
from sqlmodel import Field, SQLModel

from src.scribe.models.base import utc_now
from src.scribe.models.enums import Language, MemberRole, PostStyle, Theme, WorkspaceType


class Workspace(SQLModel, table=True):
    """A team or individual workspace. The owner never changes."""

    __tablename__ = "workspaces"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100)
    type: str = Field(default=WorkspaceType.INDIVIDUAL.value, max_length=20)
    owner_id: UUID = Field(foreign_key="users.id", index=True)
    preferred_theme: str = Field(default=Theme.LIGHT.value, max_length=20)
    default_post_style: str = Field(default=PostStyle.STANDARD.value, max_length=20)
    default_language: str = Field(default=Language.ENGLISH.value, max_length=20)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_team(self) -> bool:
        return self.type == WorkspaceType.TEAM.value


class WorkspaceMember(SQLModel, table=True):
    """Member entry of a team workspace, pending until the invite is accepted.

    ``user_id`` stays empty while the invited email has no account.
    """

    __tablename__ = "workspace_members"
    __table_args__ = (
        # At most one accepted entry per user in a workspace
        Index(
            "uq_workspace_members_accepted_user",
            "workspace_id",
            "user_id",
            unique=True,
            postgresql_where=text("invite_accepted"),
            sqlite_where=text("invite_accepted"),
        ),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    workspace_id: UUID = Field(foreign_key="workspaces.id", index=True, ondelete="CASCADE")
    user_id: UUID | None = Field(default=None, foreign_key="users.id", index=True)
    email: str = Field(max_length=255, index=True)
    role: str = Field(default=MemberRole.VIEWER.value, max_length=20)
    invite_accepted: bool = Field(default=False)
    invite_token_hash: str | None = Field(default=None, max_length=255, unique=True)
    invite_expires_at: datetime | None = Field(default=None)
    invited_by_user_id: UUID | None = Field(default=None, foreign_key="users.id")
    accepted_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def role_enum(self) -> MemberRole:
        """Get role as MemberRole enum."""
        return MemberRole(self.role)


def new_workspace(
    owner_id: UUID,
    owner_email: str,
    name: str,
    workspace_type: WorkspaceType,
    preferred_theme: Theme = Theme.LIGHT,
    default_post_style: PostStyle = PostStyle.STANDARD,
    default_language: Language = Language.ENGLISH,
) -> tuple[Workspace, WorkspaceMember | None]:
    """Build a workspace and, for team workspaces, the owner's admin entry."""
    workspace = Workspace(
        name=name.strip(),
        type=workspace_type.value,
        owner_id=owner_id,
        preferred_theme=preferred_theme.value,
        default_post_style=default_post_style.value,
        default_language=default_language.value,
    )
    if workspace_type is not WorkspaceType.TEAM:
        return workspace, None

    owner_entry = WorkspaceMember(
        workspace_id=workspace.id,
        user_id=owner_id,
        email=owner_email,
        role=MemberRole.ADMIN.value,
        invite_accepted=True,
        accepted_at=utc_now(),
    )
    return workspace, owner_entry

"""Workspace service - workspace lifecycle, membership and invitations.

Every operation takes the acting user explicitly and resolves that user's
access level on the target workspace before touching anything.
"""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.scribe.core.exceptions import (
    AlreadyMember,
    Forbidden,
    InvalidOrExpiredInvite,
    InvalidValue,
    NotFound,
)
from src.scribe.core.logging import get_logger
from src.scribe.core.notifications import MailKind, Mailer
from src.scribe.core.security import TokenPurpose, TokenService, hash_token
from src.scribe.models import (
    AccessLevel,
    Language,
    MemberRole,
    PostStyle,
    Theme,
    User,
    Workspace,
    WorkspaceMember,
    WorkspaceType,
    new_workspace,
    normalize_email,
)
from src.scribe.models.base import utc_now
from src.scribe.repositories import UserRepository, WorkspaceMemberRepository, WorkspaceRepository
from src.scribe.services.access import (
    can_delete_workspace,
    can_manage_members,
    require_access,
    resolve_access,
)

logger = get_logger(__name__)


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise InvalidValue("Workspace name is required")
    return cleaned


@dataclass
class InviteResult:
    member: WorkspaceMember
    token: str
    email_sent: bool


class WorkspaceService:
    """Service for workspace and membership operations."""

    def __init__(
        self,
        workspace_repo: WorkspaceRepository,
        member_repo: WorkspaceMemberRepository,
        user_repo: UserRepository,
        session: AsyncSession,
        token_service: TokenService,
        mailer: Mailer,
    ):
        self.workspace_repo = workspace_repo
        self.member_repo = member_repo
        self.user_repo = user_repo
        self.session = session
        self.token_service = token_service
        self.mailer = mailer

    async def resolve(self, user: User, workspace_id: UUID) -> tuple[Workspace, AccessLevel]:
        """Load a workspace and the user's access level on it.

        Raises NotFound if the workspace does not exist.
        """
        workspace = await self.workspace_repo.get_by_id(workspace_id)
        if workspace is None:
            raise NotFound("Workspace not found")
        member = await self.member_repo.get_for_user(workspace_id, user.id)
        return workspace, resolve_access(workspace, member, user.id)

    async def create_workspace(
        self,
        user: User,
        name: str,
        workspace_type: WorkspaceType,
        preferred_theme: Theme = Theme.LIGHT,
        default_post_style: PostStyle = PostStyle.STANDARD,
        default_language: Language = Language.ENGLISH,
    ) -> Workspace:
        """Create a workspace owned by ``user``; team workspaces list the owner as admin."""
        workspace, owner_entry = new_workspace(
            owner_id=user.id,
            owner_email=user.email,
            name=_clean_name(name),
            workspace_type=workspace_type,
            preferred_theme=preferred_theme,
            default_post_style=default_post_style,
            default_language=default_language,
        )
        try:
            self.workspace_repo.add(workspace)
            if owner_entry is not None:
                # Flush parent first so the FK is satisfied
                await self.session.flush()
                self.member_repo.add(owner_entry)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Workspace created",
            workspace_id=str(workspace.id),
            owner_id=str(user.id),
            type=workspace.type,
        )
        return workspace

    async def list_workspaces(self, user: User) -> list[Workspace]:
        """Owned workspaces plus those with an accepted membership."""
        return await self.workspace_repo.list_for_user(user.id)

    async def get_workspace(self, user: User, workspace_id: UUID) -> Workspace:
        workspace, level = await self.resolve(user, workspace_id)
        require_access(level, AccessLevel.MEMBER)
        return workspace

    async def update_workspace(
        self,
        user: User,
        workspace_id: UUID,
        name: str | None = None,
        preferred_theme: Theme | None = None,
        default_post_style: PostStyle | None = None,
        default_language: Language | None = None,
    ) -> Workspace:
        """Rename a workspace or change its settings. Owner or admin only."""
        workspace, level = await self.resolve(user, workspace_id)
        require_access(level, AccessLevel.ADMIN)

        if name is not None:
            workspace.name = _clean_name(name)
        if preferred_theme is not None:
            workspace.preferred_theme = preferred_theme.value
        if default_post_style is not None:
            workspace.default_post_style = default_post_style.value
        if default_language is not None:
            workspace.default_language = default_language.value
        workspace.updated_at = utc_now()

        try:
            self.workspace_repo.add(workspace)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Workspace updated", workspace_id=str(workspace.id))
        return workspace

    async def delete_workspace(self, user: User, workspace_id: UUID) -> None:
        """Delete a workspace and its member entries. Owner only."""
        workspace, level = await self.resolve(user, workspace_id)
        if not can_delete_workspace(level):
            raise Forbidden("Only the workspace owner can delete it")

        try:
            await self.workspace_repo.delete_with_members(workspace)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Workspace deleted", workspace_id=str(workspace_id))

    async def list_members(self, user: User, workspace_id: UUID) -> list[WorkspaceMember]:
        _, level = await self.resolve(user, workspace_id)
        require_access(level, AccessLevel.MEMBER)
        return await self.member_repo.list_by_workspace(workspace_id)

    async def invite(
        self,
        user: User,
        workspace_id: UUID,
        email: str,
        role: MemberRole,
    ) -> InviteResult:
        """Invite an email address to a team workspace.

        Returns the pending entry and the plaintext token. Any earlier pending
        entry for the same email is replaced, so only the newest link works.
        """
        workspace, level = await self.resolve(user, workspace_id)
        if not can_manage_members(level):
            raise Forbidden()
        if not workspace.is_team:
            raise Forbidden("Individual workspaces cannot have members")

        email = normalize_email(email)
        owner = await self.user_repo.get_by_id(workspace.owner_id)
        if owner is not None and owner.email == email:
            raise AlreadyMember()
        if await self.member_repo.get_accepted_by_email(workspace_id, email):
            raise AlreadyMember()

        invitee = await self.user_repo.get_by_email(email)
        if invitee is not None:
            existing = await self.member_repo.get_for_user(workspace_id, invitee.id)
            if existing is not None and existing.invite_accepted:
                raise AlreadyMember()

        invite = self.token_service.issue_one_time_code(TokenPurpose.INVITE)
        member = WorkspaceMember(
            workspace_id=workspace_id,
            user_id=invitee.id if invitee else None,
            email=email,
            role=role.value,
            invite_token_hash=invite.stored_value,
            invite_expires_at=invite.expires_at,
            invited_by_user_id=user.id,
        )

        try:
            await self.member_repo.delete_pending_by_email(workspace_id, email)
            self.member_repo.add(member)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        sent = await self.mailer.send(
            MailKind.WORKSPACE_INVITE,
            email,
            {
                "workspace_name": workspace.name,
                "inviter_name": user.full_name,
                "role": role.value,
                "token": invite.value,
            },
        )

        logger.info(
            "Invite created",
            workspace_id=str(workspace_id),
            member_id=str(member.id),
            invited_by=str(user.id),
            email_sent=sent,
        )
        return InviteResult(member=member, token=invite.value, email_sent=sent)

    async def accept_invitation(self, token: str, user: User | None = None) -> Workspace:
        """Accept a pending invitation by its token.

        No authentication is required. When ``user`` is given and the entry is
        not bound to an account yet, it is bound to ``user``. The account the
        entry ends up with must not already be a member; its other pending
        entries in the workspace are dropped.
        """
        token_hash = hash_token(token)
        member = await self.member_repo.get_pending_by_token_hash(token_hash)
        if member is None:
            raise InvalidOrExpiredInvite()

        workspace = await self.workspace_repo.get_by_id(member.workspace_id)
        if workspace is None:
            raise InvalidOrExpiredInvite()

        binding_user_id: UUID | None = None
        if user is not None and member.user_id is None:
            binding_user_id = user.id
        member_user_id = member.user_id or binding_user_id

        if member_user_id is not None:
            if workspace.owner_id == member_user_id:
                raise AlreadyMember()
            if await self.member_repo.has_accepted_entry(workspace.id, member_user_id):
                raise AlreadyMember()

        try:
            accepted = await self.member_repo.accept(member.id, token_hash, binding_user_id)
            if not accepted:
                raise InvalidOrExpiredInvite()
            if member_user_id is not None:
                await self.member_repo.delete_pending_for_user(workspace.id, member_user_id)
            await self.session.commit()
        except IntegrityError as e:
            # A concurrent accept for the same account won the race
            await self.session.rollback()
            raise AlreadyMember() from e
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Invite accepted",
            workspace_id=str(workspace.id),
            member_id=str(member.id),
        )
        return workspace

    async def remove_member(self, user: User, workspace_id: UUID, member_id: UUID) -> None:
        """Remove a member entry (accepted or pending). The owner cannot be removed."""
        workspace, level = await self.resolve(user, workspace_id)
        if not can_manage_members(level):
            raise Forbidden()

        member = await self.member_repo.get_in_workspace(workspace_id, member_id)
        if member is None:
            raise NotFound("Member not found")
        if member.user_id == workspace.owner_id:
            raise Forbidden("The workspace owner cannot be removed")

        try:
            await self.member_repo.delete(member)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Member removed", workspace_id=str(workspace_id), member_id=str(member_id))

    async def update_member_role(
        self,
        user: User,
        workspace_id: UUID,
        member_id: UUID,
        role: MemberRole,
    ) -> WorkspaceMember:
        """Change a member's role. The owner's role is fixed."""
        workspace, level = await self.resolve(user, workspace_id)
        if not can_manage_members(level):
            raise Forbidden()

        member = await self.member_repo.get_in_workspace(workspace_id, member_id)
        if member is None:
            raise NotFound("Member not found")
        if member.user_id == workspace.owner_id:
            raise Forbidden("The workspace owner's role cannot be changed")

        member.role = role.value
        try:
            self.member_repo.add(member)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Member role updated",
            workspace_id=str(workspace_id),
            member_id=str(member_id),
            role=role.value,
        )
        return member

"""Workspace access resolution.

Pure functions over already-loaded records; callers load the workspace and
the caller's member entry and decide what to do with the result.
"""

from uuid import UUID

from src.scribe.core.exceptions import Forbidden
from src.scribe.models import AccessLevel, MemberRole, Workspace, WorkspaceMember


def resolve_access(
    workspace: Workspace,
    member: WorkspaceMember | None,
    user_id: UUID,
) -> AccessLevel:
    """Compute the access level of ``user_id`` on ``workspace``.

    The owner is admin-equivalent even without a member entry. Individual
    workspaces are reachable by their owner only.
    """
    if workspace.owner_id == user_id:
        return AccessLevel.OWNER
    if not workspace.is_team:
        return AccessLevel.NO_ACCESS
    if member is None or member.user_id != user_id:
        return AccessLevel.NO_ACCESS
    if not member.invite_accepted:
        return AccessLevel.PENDING_INVITE
    if member.role_enum is MemberRole.ADMIN:
        return AccessLevel.ADMIN
    return AccessLevel.MEMBER


def require_access(level: AccessLevel, minimum: AccessLevel) -> None:
    """Raise Forbidden unless ``level`` reaches ``minimum``."""
    if not level.at_least(minimum):
        raise Forbidden()


def can_manage_members(level: AccessLevel) -> bool:
    """Owners and admins invite, remove and re-role members."""
    return level.at_least(AccessLevel.ADMIN)


def can_delete_workspace(level: AccessLevel) -> bool:
    return level is AccessLevel.OWNER

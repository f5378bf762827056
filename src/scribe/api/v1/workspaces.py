"""Workspace, membership and invitation endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from src.scribe.api.dependencies import (
    CurrentWorkspace,
    OptionalAuth,
    VerifiedAuth,
    WorkspaceServiceDep,
)
from src.scribe.schemas.workspace import (
    InviteRequest,
    InviteResponse,
    MemberRead,
    MemberRoleUpdate,
    WorkspaceCreate,
    WorkspaceDetail,
    WorkspaceRead,
    WorkspaceUpdate,
)

router = APIRouter(prefix="/workspaces", tags=["workspaces"])


@router.post("", response_model=WorkspaceRead, status_code=status.HTTP_201_CREATED)
async def create_workspace(
    data: WorkspaceCreate, auth: VerifiedAuth, service: WorkspaceServiceDep
) -> WorkspaceRead:
    workspace = await service.create_workspace(
        auth.user,
        name=data.name,
        workspace_type=data.type,
        preferred_theme=data.preferred_theme,
        default_post_style=data.default_post_style,
        default_language=data.default_language,
    )
    return WorkspaceRead.model_validate(workspace)


@router.get("", response_model=list[WorkspaceRead])
async def list_workspaces(auth: VerifiedAuth, service: WorkspaceServiceDep) -> list[WorkspaceRead]:
    """Workspaces the caller owns or has joined."""
    workspaces = await service.list_workspaces(auth.user)
    return [WorkspaceRead.model_validate(w) for w in workspaces]


@router.post(
    "/invitations/{token}/accept",
    response_model=WorkspaceRead,
    responses={404: {"description": "Invalid or expired invitation"}},
)
async def accept_invitation(
    token: str, auth: OptionalAuth, service: WorkspaceServiceDep
) -> WorkspaceRead:
    """Accept an invitation. Signing in is optional; a signed-in caller is bound to it."""
    workspace = await service.accept_invitation(token, auth.user if auth else None)
    return WorkspaceRead.model_validate(workspace)


@router.get("/{workspace_id}", response_model=WorkspaceDetail)
async def get_workspace(ctx: CurrentWorkspace) -> WorkspaceDetail:
    return WorkspaceDetail(
        **WorkspaceRead.model_validate(ctx.workspace).model_dump(),
        access_level=ctx.access_level,
    )


@router.patch("/{workspace_id}", response_model=WorkspaceRead)
async def update_workspace(
    workspace_id: UUID,
    data: WorkspaceUpdate,
    auth: VerifiedAuth,
    service: WorkspaceServiceDep,
) -> WorkspaceRead:
    """Rename or reconfigure a workspace. Owner or admin only."""
    workspace = await service.update_workspace(
        auth.user,
        workspace_id,
        name=data.name,
        preferred_theme=data.preferred_theme,
        default_post_style=data.default_post_style,
        default_language=data.default_language,
    )
    return WorkspaceRead.model_validate(workspace)


@router.delete("/{workspace_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_workspace(
    workspace_id: UUID, auth: VerifiedAuth, service: WorkspaceServiceDep
) -> None:
    """Delete a workspace. Owner only."""
    await service.delete_workspace(auth.user, workspace_id)


@router.get("/{workspace_id}/members", response_model=list[MemberRead])
async def list_members(
    workspace_id: UUID, auth: VerifiedAuth, service: WorkspaceServiceDep
) -> list[MemberRead]:
    members = await service.list_members(auth.user, workspace_id)
    return [MemberRead.model_validate(m) for m in members]


@router.post(
    "/{workspace_id}/invite",
    response_model=InviteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        403: {"description": "Not an owner/admin, or an individual workspace"},
        409: {"description": "Already a member"},
    },
)
async def invite_member(
    workspace_id: UUID,
    data: InviteRequest,
    auth: VerifiedAuth,
    service: WorkspaceServiceDep,
) -> InviteResponse:
    result = await service.invite(auth.user, workspace_id, data.email, data.role)
    return InviteResponse(
        member=MemberRead.model_validate(result.member),
        email_sent=result.email_sent,
    )


@router.delete("/{workspace_id}/members/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    workspace_id: UUID,
    member_id: UUID,
    auth: VerifiedAuth,
    service: WorkspaceServiceDep,
) -> None:
    await service.remove_member(auth.user, workspace_id, member_id)


@router.patch("/{workspace_id}/members/{member_id}", response_model=MemberRead)
async def update_member_role(
    workspace_id: UUID,
    member_id: UUID,
    data: MemberRoleUpdate,
    auth: VerifiedAuth,
    service: WorkspaceServiceDep,
) -> MemberRead:
    member = await service.update_member_role(auth.user, workspace_id, member_id, data.role)
    return MemberRead.model_validate(member)

"""Repositories for Workspace and WorkspaceMember entities."""

from uuid import UUID

from sqlalchemy import delete, func, or_
from sqlmodel import select, update

from src.scribe.models import Workspace, WorkspaceMember
from src.scribe.models.base import utc_now
from src.scribe.repositories.base import BaseRepository


class WorkspaceRepository(BaseRepository[Workspace]):
    """Repository for Workspace entity."""

    model = Workspace

    async def list_for_user(self, user_id: UUID) -> list[Workspace]:
        """Workspaces the user owns or holds an accepted membership in."""
        accepted = select(WorkspaceMember.workspace_id).where(
            WorkspaceMember.user_id == user_id,
            WorkspaceMember.invite_accepted == True,  # noqa: E712
        )
        result = await self.session.execute(
            select(Workspace)
            .where(
                or_(
                    Workspace.owner_id == user_id,  # type: ignore[arg-type]
                    Workspace.id.in_(accepted),  # type: ignore[attr-defined]
                )
            )
            .order_by(Workspace.created_at)  # type: ignore[arg-type]
        )
        return list(result.scalars().all())

    async def delete_with_members(self, workspace: Workspace) -> None:
        """Delete a workspace and every member entry it holds (no commit)."""
        await self.session.execute(
            delete(WorkspaceMember).where(
                WorkspaceMember.workspace_id == workspace.id  # type: ignore[arg-type]
            )
        )
        await self.session.delete(workspace)


class WorkspaceMemberRepository(BaseRepository[WorkspaceMember]):
    """Repository for WorkspaceMember entity."""

    model = WorkspaceMember

    async def get_in_workspace(self, workspace_id: UUID, member_id: UUID) -> WorkspaceMember | None:
        """Get a member entry, scoped to its workspace."""
        result = await self.session.execute(
            select(WorkspaceMember).where(
                WorkspaceMember.id == member_id,
                WorkspaceMember.workspace_id == workspace_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_for_user(self, workspace_id: UUID, user_id: UUID) -> WorkspaceMember | None:
        """Get the user's entry in a workspace, preferring an accepted one."""
        result = await self.session.execute(
            select(WorkspaceMember)
            .where(
                WorkspaceMember.workspace_id == workspace_id,
                WorkspaceMember.user_id == user_id,
            )
            .order_by(WorkspaceMember.invite_accepted.desc())  # type: ignore[attr-defined]
            .limit(1)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def has_accepted_entry(self, workspace_id: UUID, user_id: UUID) -> bool:
        result = await self.session.execute(
            select(WorkspaceMember.id)
            .where(
                WorkspaceMember.workspace_id == workspace_id,
                WorkspaceMember.user_id == user_id,
                WorkspaceMember.invite_accepted == True,  # noqa: E712
            )
            .limit(1)
        )
        return result.first() is not None

    async def get_accepted_by_email(self, workspace_id: UUID, email: str) -> WorkspaceMember | None:
        """Get the accepted entry for an email in a workspace."""
        result = await self.session.execute(
            select(WorkspaceMember)
            .where(
                WorkspaceMember.workspace_id == workspace_id,
                WorkspaceMember.email == email,
                WorkspaceMember.invite_accepted == True,  # noqa: E712
            )
            .limit(1)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def list_by_workspace(self, workspace_id: UUID) -> list[WorkspaceMember]:
        """List all entries of a workspace, accepted and pending."""
        result = await self.session.execute(
            select(WorkspaceMember)
            .where(WorkspaceMember.workspace_id == workspace_id)
            .order_by(WorkspaceMember.created_at)  # type: ignore[arg-type]
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def delete_pending_by_email(self, workspace_id: UUID, email: str) -> None:
        """Drop unaccepted entries for an email so a fresh invite replaces them."""
        await self.session.execute(
            delete(WorkspaceMember).where(
                WorkspaceMember.workspace_id == workspace_id,  # type: ignore[arg-type]
                WorkspaceMember.email == email,  # type: ignore[arg-type]
                WorkspaceMember.invite_accepted == False,  # type: ignore[arg-type]  # noqa: E712
            )
        )

    async def delete_pending_for_user(self, workspace_id: UUID, user_id: UUID) -> None:
        """Drop the user's remaining unaccepted entries in a workspace (no commit)."""
        await self.session.execute(
            delete(WorkspaceMember).where(
                WorkspaceMember.workspace_id == workspace_id,  # type: ignore[arg-type]
                WorkspaceMember.user_id == user_id,  # type: ignore[arg-type]
                WorkspaceMember.invite_accepted == False,  # type: ignore[arg-type]  # noqa: E712
            )
        )

    async def get_pending_by_token_hash(self, token_hash: str) -> WorkspaceMember | None:
        """Get an unaccepted, unexpired entry by its invite token hash."""
        result = await self.session.execute(
            select(WorkspaceMember).where(
                WorkspaceMember.invite_token_hash == token_hash,
                WorkspaceMember.invite_accepted == False,  # noqa: E712
                WorkspaceMember.invite_expires_at > utc_now(),  # type: ignore[operator]
            )
        )
        return result.scalar_one_or_none()

    async def accept(self, member_id: UUID, token_hash: str, user_id: UUID | None) -> bool:
        """Flip a pending entry to accepted and clear its token.

        Keyed on the token hash, so of two concurrent accepts only one matches.
        ``user_id`` binds the entry only when it is not bound yet.
        """
        now = utc_now()
        values: dict[str, object] = {
            "invite_accepted": True,
            "accepted_at": now,
            "invite_token_hash": None,
            "invite_expires_at": None,
        }
        if user_id is not None:
            values["user_id"] = func.coalesce(WorkspaceMember.user_id, user_id)

        result = await self.session.execute(
            update(WorkspaceMember)
            .where(WorkspaceMember.id == member_id)  # type: ignore[arg-type]
            .where(WorkspaceMember.invite_token_hash == token_hash)  # type: ignore[arg-type]
            .where(WorkspaceMember.invite_accepted == False)  # type: ignore[arg-type]  # noqa: E712
            .where(WorkspaceMember.invite_expires_at > now)  # type: ignore[arg-type, operator]
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return (result.rowcount or 0) == 1  # type: ignore[attr-defined]

    async def bind_email_to_user(self, email: str, user_id: UUID) -> int:
        """Attach unbound entries addressed to ``email`` to a newly known user."""
        result = await self.session.execute(
            update(WorkspaceMember)
            .where(WorkspaceMember.email == email)  # type: ignore[arg-type]
            .where(WorkspaceMember.user_id == None)  # type: ignore[arg-type]  # noqa: E711
            .values(user_id=user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0  # type: ignore[attr-defined]

"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.scribe.api.dependencies.db import DBSession
from src.scribe.repositories import UserRepository, WorkspaceMemberRepository, WorkspaceRepository


def get_user_repository(session: DBSession) -> UserRepository:
    """Get user repository bound to the request session."""
    return UserRepository(session)


def get_workspace_repository(session: DBSession) -> WorkspaceRepository:
    """Get workspace repository bound to the request session."""
    return WorkspaceRepository(session)


def get_member_repository(session: DBSession) -> WorkspaceMemberRepository:
    """Get workspace member repository bound to the request session."""
    return WorkspaceMemberRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
WorkspaceRepo = Annotated[WorkspaceRepository, Depends(get_workspace_repository)]
MemberRepo = Annotated[WorkspaceMemberRepository, Depends(get_member_repository)]

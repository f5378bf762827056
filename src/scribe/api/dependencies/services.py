"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.scribe.api.dependencies.app_state import MailerDep, TokenServiceDep
from src.scribe.api.dependencies.db import DBSession
from src.scribe.api.dependencies.repositories import MemberRepo, UserRepo, WorkspaceRepo
from src.scribe.services import IdentityService, OnboardingService, UserService, WorkspaceService


def get_identity_service(
    user_repo: UserRepo,
    member_repo: MemberRepo,
    session: DBSession,
    token_service: TokenServiceDep,
    mailer: MailerDep,
) -> IdentityService:
    """Get identity service."""
    return IdentityService(user_repo, member_repo, session, token_service, mailer)


def get_workspace_service(
    workspace_repo: WorkspaceRepo,
    member_repo: MemberRepo,
    user_repo: UserRepo,
    session: DBSession,
    token_service: TokenServiceDep,
    mailer: MailerDep,
) -> WorkspaceService:
    """Get workspace service."""
    return WorkspaceService(workspace_repo, member_repo, user_repo, session, token_service, mailer)


def get_onboarding_service(
    user_repo: UserRepo,
    workspace_repo: WorkspaceRepo,
    member_repo: MemberRepo,
    session: DBSession,
) -> OnboardingService:
    """Get onboarding service."""
    return OnboardingService(user_repo, workspace_repo, member_repo, session)


def get_user_service(user_repo: UserRepo, session: DBSession) -> UserService:
    """Get user service."""
    return UserService(user_repo, session)


IdentityServiceDep = Annotated[IdentityService, Depends(get_identity_service)]
WorkspaceServiceDep = Annotated[WorkspaceService, Depends(get_workspace_service)]
OnboardingServiceDep = Annotated[OnboardingService, Depends(get_onboarding_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]

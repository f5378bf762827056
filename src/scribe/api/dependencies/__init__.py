"""FastAPI dependency injection definitions."""

from src.scribe.api.dependencies.app_state import (
    MailerDep,
    OAuthProviders,
    TokenServiceDep,
    get_mailer,
    get_oauth_providers,
    get_token_service,
)
from src.scribe.api.dependencies.auth import (
    AuthContext,
    CurrentAuth,
    CurrentWorkspace,
    OptionalAuth,
    VerifiedAuth,
    WorkspaceContext,
    get_auth_context,
    get_optional_auth_context,
    get_verified_auth_context,
    get_workspace_context,
)
from src.scribe.api.dependencies.db import DBSession, get_db_session
from src.scribe.api.dependencies.repositories import (
    MemberRepo,
    UserRepo,
    WorkspaceRepo,
    get_member_repository,
    get_user_repository,
    get_workspace_repository,
)
from src.scribe.api.dependencies.services import (
    IdentityServiceDep,
    OnboardingServiceDep,
    UserServiceDep,
    WorkspaceServiceDep,
    get_identity_service,
    get_onboarding_service,
    get_user_service,
    get_workspace_service,
)

__all__ = [
    # App state
    "MailerDep",
    "OAuthProviders",
    "TokenServiceDep",
    "get_mailer",
    "get_oauth_providers",
    "get_token_service",
    # Database
    "DBSession",
    "get_db_session",
    # Auth
    "AuthContext",
    "CurrentAuth",
    "CurrentWorkspace",
    "OptionalAuth",
    "VerifiedAuth",
    "WorkspaceContext",
    "get_auth_context",
    "get_optional_auth_context",
    "get_verified_auth_context",
    "get_workspace_context",
    # Repositories
    "MemberRepo",
    "UserRepo",
    "WorkspaceRepo",
    "get_member_repository",
    "get_user_repository",
    "get_workspace_repository",
    # Services
    "IdentityServiceDep",
    "OnboardingServiceDep",
    "UserServiceDep",
    "WorkspaceServiceDep",
    "get_identity_service",
    "get_onboarding_service",
    "get_user_service",
    "get_workspace_service",
]

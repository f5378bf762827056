from src.scribe.services.identity_service import (
    IdentityService,
    OAuthLoginResult,
    RegistrationResult,
)
from src.scribe.services.onboarding_service import OnboardingService, OnboardingState
from src.scribe.services.user_service import UserService
from src.scribe.services.workspace_service import InviteResult, WorkspaceService

__all__ = [
    "IdentityService",
    "InviteResult",
    "OAuthLoginResult",
    "OnboardingService",
    "OnboardingState",
    "RegistrationResult",
    "UserService",
    "WorkspaceService",
]

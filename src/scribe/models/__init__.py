"""Model exports.

Import from here: `from src.scribe.models import User, Workspace`
"""

# Enums
from src.scribe.models.enums import (
    AccessLevel,
    Language,
    MemberRole,
    OAuthProviderName,
    OnboardingStatus,
    PostStyle,
    Theme,
    WorkspaceType,
)

# Models
from src.scribe.models.user import User, UserIdentity, new_oauth_user, new_user, normalize_email
from src.scribe.models.workspace import Workspace, WorkspaceMember, new_workspace

__all__ = [
    # Enums
    "AccessLevel",
    "Language",
    "MemberRole",
    "OAuthProviderName",
    "OnboardingStatus",
    "PostStyle",
    "Theme",
    "WorkspaceType",
    # Models
    "User",
    "UserIdentity",
    "Workspace",
    "WorkspaceMember",
    # Factories
    "new_oauth_user",
    "new_user",
    "new_workspace",
    "normalize_email",
]

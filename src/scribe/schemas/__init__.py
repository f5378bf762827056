from src.scribe.schemas.auth import (
    AccessTokenResponse,
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    OAuthLoginResponse,
    RefreshRequest,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
    TokenResponse,
    VerifyEmailRequest,
)
from src.scribe.schemas.user import PreferencesRead, PreferenceUpdate, UserRead, UserUpdate
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

__all__ = [
    # Auth
    "AccessTokenResponse",
    "ChangePasswordRequest",
    "ForgotPasswordRequest",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "OAuthLoginResponse",
    "RefreshRequest",
    "RegisterRequest",
    "RegisterResponse",
    "ResetPasswordRequest",
    "TokenResponse",
    "VerifyEmailRequest",
    # User
    "PreferenceUpdate",
    "PreferencesRead",
    "UserRead",
    "UserUpdate",
    # Workspace
    "InviteRequest",
    "InviteResponse",
    "MemberRead",
    "MemberRoleUpdate",
    "WorkspaceCreate",
    "WorkspaceDetail",
    "WorkspaceRead",
    "WorkspaceUpdate",
]

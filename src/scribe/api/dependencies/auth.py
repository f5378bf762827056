"""Authentication and workspace-access dependencies.

Handlers receive explicit ``AuthContext`` / ``WorkspaceContext`` values rather
than reading the user off the request.
"""

from dataclasses import dataclass
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header

from src.scribe.api.dependencies.services import IdentityServiceDep, WorkspaceServiceDep
from src.scribe.core.config import get_settings
from src.scribe.core.exceptions import Forbidden, InvalidToken
from src.scribe.core.logging import bind_user_context
from src.scribe.models import AccessLevel, User, Workspace
from src.scribe.services.access import require_access


@dataclass(frozen=True)
class AuthContext:
    """The authenticated caller of a request."""

    user: User

    @property
    def user_id(self) -> UUID:
        return self.user.id


@dataclass(frozen=True)
class WorkspaceContext:
    """The caller plus the workspace a request targets and their access level on it."""

    user: User
    workspace: Workspace
    access_level: AccessLevel


def _bearer_token(authorization: str | None) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise InvalidToken("Missing or invalid authorization header")
    return authorization[7:]


async def get_auth_context(
    service: IdentityServiceDep,
    authorization: Annotated[str | None, Header()] = None,
) -> AuthContext:
    """Validate the bearer access token and return the caller."""
    user = await service.authenticate_access_token(_bearer_token(authorization))
    bind_user_context(user.id, email=user.email)
    return AuthContext(user=user)


CurrentAuth = Annotated[AuthContext, Depends(get_auth_context)]


async def get_optional_auth_context(
    service: IdentityServiceDep,
    authorization: Annotated[str | None, Header()] = None,
) -> AuthContext | None:
    """Like ``get_auth_context`` but anonymous callers get None.

    A header that is present but invalid is still rejected.
    """
    if authorization is None:
        return None
    return await get_auth_context(service, authorization)


OptionalAuth = Annotated[AuthContext | None, Depends(get_optional_auth_context)]


async def get_verified_auth_context(auth: CurrentAuth) -> AuthContext:
    """Require a verified email when the deployment enforces it."""
    if get_settings().require_verified_email and not auth.user.email_verified:
        raise Forbidden("Please verify your email address first")
    return auth


VerifiedAuth = Annotated[AuthContext, Depends(get_verified_auth_context)]


async def get_workspace_context(
    workspace_id: UUID,
    auth: VerifiedAuth,
    service: WorkspaceServiceDep,
) -> WorkspaceContext:
    """Resolve the targeted workspace; callers below member level are rejected."""
    workspace, level = await service.resolve(auth.user, workspace_id)
    require_access(level, AccessLevel.MEMBER)
    bind_user_context(auth.user.id, workspace_id=workspace.id)
    return WorkspaceContext(user=auth.user, workspace=workspace, access_level=level)


CurrentWorkspace = Annotated[WorkspaceContext, Depends(get_workspace_context)]

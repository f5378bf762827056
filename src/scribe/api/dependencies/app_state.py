"""Collaborators built once in ``create_app`` and held on ``app.state``."""

from typing import Annotated

from fastapi import Depends, Request

from src.scribe.core.notifications import Mailer
from src.scribe.core.oauth import OAuthProvider
from src.scribe.core.security import TokenService
from src.scribe.models import OAuthProviderName


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service  # type: ignore[no-any-return]


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer  # type: ignore[no-any-return]


def get_oauth_providers(request: Request) -> dict[OAuthProviderName, OAuthProvider]:
    return request.app.state.oauth_providers  # type: ignore[no-any-return]


TokenServiceDep = Annotated[TokenService, Depends(get_token_service)]
MailerDep = Annotated[Mailer, Depends(get_mailer)]
OAuthProviders = Annotated[dict[OAuthProviderName, OAuthProvider], Depends(get_oauth_providers)]

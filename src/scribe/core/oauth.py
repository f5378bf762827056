"""OAuth identity providers.

Each provider turns an authorization code into a normalized ``OAuthProfile``.
Providers are built once at startup from settings; services only ever see
the normalized profile.
"""

from dataclasses import dataclass
from typing import Any

import httpx

from src.scribe.core.config import Settings
from src.scribe.core.exceptions import OAuthFailed
from src.scribe.core.logging import get_logger
from src.scribe.models.enums import OAuthProviderName

logger = get_logger(__name__)


@dataclass(frozen=True)
class OAuthProfile:
    """Provider-independent view of an external identity."""

    provider_id: str
    email: str
    given_name: str | None = None
    family_name: str | None = None


class OAuthProvider:
    """Authorization-code exchange against an OpenID Connect style provider."""

    name: OAuthProviderName

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        token_url: str,
        userinfo_url: str,
        timeout: float = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.token_url = token_url
        self.userinfo_url = userinfo_url
        self.timeout = timeout
        self.transport = transport

    async def exchange_code(self, code: str) -> OAuthProfile:
        """Exchange an authorization code for the caller's profile.

        Raises:
            OAuthFailed: On transport errors, rejected codes or incomplete profiles.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                access_token = await self._fetch_access_token(client, code)
                response = await client.get(
                    self.userinfo_url,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                response.raise_for_status()
                userinfo = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("OAuth exchange failed", provider=self.name.value, error=str(e))
            raise OAuthFailed() from e

        return self.parse_profile(userinfo)

    async def _fetch_access_token(self, client: httpx.AsyncClient, code: str) -> str:
        response = await client.post(
            self.token_url,
            data={
                "grant_type": "authorization_code",
                "code": code,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uri": self.redirect_uri,
            },
            headers={"Accept": "application/json"},
        )
        response.raise_for_status()

        access_token = response.json().get("access_token")
        if not access_token:
            logger.warning("OAuth token response missing access_token", provider=self.name.value)
            raise OAuthFailed()
        return str(access_token)

    def parse_profile(self, userinfo: dict[str, Any]) -> OAuthProfile:
        """Normalize an OpenID Connect userinfo document."""
        provider_id = userinfo.get("sub")
        email = userinfo.get("email")
        if not provider_id or not email:
            raise OAuthFailed("OAuth provider did not return an email address")
        return OAuthProfile(
            provider_id=str(provider_id),
            email=str(email),
            given_name=userinfo.get("given_name"),
            family_name=userinfo.get("family_name"),
        )


class GoogleProvider(OAuthProvider):
    name = OAuthProviderName.GOOGLE

    def parse_profile(self, userinfo: dict[str, Any]) -> OAuthProfile:
        # Google marks unverified addresses; those cannot be trusted for linking.
        if userinfo.get("email_verified") is False:
            raise OAuthFailed("Google account email is not verified")
        return super().parse_profile(userinfo)


class LinkedInProvider(OAuthProvider):
    name = OAuthProviderName.LINKEDIN


def build_oauth_providers(settings: Settings) -> dict[OAuthProviderName, OAuthProvider]:
    """Instantiate the providers that have client credentials configured."""
    providers: dict[OAuthProviderName, OAuthProvider] = {}

    if settings.google_client_id and settings.google_client_secret:
        providers[OAuthProviderName.GOOGLE] = GoogleProvider(
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            redirect_uri=settings.google_redirect_uri,
            token_url=settings.google_token_url,
            userinfo_url=settings.google_userinfo_url,
            timeout=settings.oauth_timeout_seconds,
        )

    if settings.linkedin_client_id and settings.linkedin_client_secret:
        providers[OAuthProviderName.LINKEDIN] = LinkedInProvider(
            client_id=settings.linkedin_client_id,
            client_secret=settings.linkedin_client_secret,
            redirect_uri=settings.linkedin_redirect_uri,
            token_url=settings.linkedin_token_url,
            userinfo_url=settings.linkedin_userinfo_url,
            timeout=settings.oauth_timeout_seconds,
        )

    return providers

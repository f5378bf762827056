"""Shared test doubles and helpers."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from src.scribe.core.config import Settings
from src.scribe.core.exceptions import OAuthFailed
from src.scribe.core.notifications import MailKind, Mailer
from src.scribe.core.oauth import OAuthProfile, OAuthProvider
from src.scribe.core.security import TokenService
from src.scribe.models import OAuthProviderName

# Passes the zxcvbn strength check used by request schemas
STRONG_PASSWORD = "correct-horse-battery-staple-42"


@dataclass
class SentMail:
    kind: MailKind
    to: str
    data: dict[str, Any]


class RecordingMailer(Mailer):
    """Mailer that records messages instead of delivering them.

    Set ``fail`` to simulate a delivery failure.
    """

    def __init__(self, settings: Settings, fail: bool = False):
        super().__init__(settings)
        self.fail = fail
        self.sent: list[SentMail] = []

    async def send(self, kind: MailKind, to: str, data: Mapping[str, Any]) -> bool:
        if self.fail:
            return False
        self.sent.append(SentMail(kind=kind, to=to, data=dict(data)))
        return True

    def last(self, kind: MailKind, to: str | None = None) -> SentMail:
        for mail in reversed(self.sent):
            if mail.kind is kind and (to is None or mail.to == to):
                return mail
        raise AssertionError(f"No {kind.value} email sent to {to or 'anyone'}")


class StubOAuthProvider(OAuthProvider):
    """Provider that maps authorization codes straight to profiles."""

    def __init__(self, name: OAuthProviderName, profiles: dict[str, OAuthProfile]):
        super().__init__(
            client_id="test-client",
            client_secret="test-secret",
            redirect_uri="http://test/callback",
            token_url="http://oauth.test/token",
            userinfo_url="http://oauth.test/userinfo",
        )
        self.name = name
        self.profiles = profiles

    async def exchange_code(self, code: str) -> OAuthProfile:
        try:
            return self.profiles[code]
        except KeyError:
            raise OAuthFailed() from None


def auth_headers(token_service: TokenService, user_id: UUID) -> dict[str, str]:
    """Bearer headers carrying a fresh access token for ``user_id``."""
    tokens = token_service.issue_pair(user_id)
    return {"Authorization": f"Bearer {tokens.access_token}"}

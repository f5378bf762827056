"""End-to-end tests for the authentication endpoints."""

import pytest
from httpx import AsyncClient

from src.scribe.core.notifications import MailKind
from src.scribe.core.oauth import OAuthProfile
from src.scribe.models import OAuthProviderName
from tests.factories import DEFAULT_TEST_PASSWORD
from tests.helpers import STRONG_PASSWORD, RecordingMailer, StubOAuthProvider

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]

REGISTER = {
    "first_name": "Alice",
    "last_name": "Liddell",
    "email": "alice@example.com",
    "password": STRONG_PASSWORD,
}


async def register(client: AsyncClient, **overrides) -> dict:
    response = await client.post("/api/v1/auth/register", json={**REGISTER, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class TestRegisterAndLogin:
    async def test_register(self, client: AsyncClient, mailer: RecordingMailer):
        data = await register(client)

        assert data["user"]["email"] == "alice@example.com"
        assert data["user"]["email_verified"] is False
        assert data["user"]["has_password"] is True
        assert data["user"]["onboarding_status"] == "incomplete"
        assert data["verification_email_sent"] is True
        assert data["token_type"] == "bearer"
        assert "hashed_password" not in data["user"]
        assert "verification_code" not in data["user"]
        assert mailer.last(MailKind.VERIFY_EMAIL, to="alice@example.com")

    async def test_register_duplicate(self, client: AsyncClient):
        await register(client)

        response = await client.post(
            "/api/v1/auth/register", json={**REGISTER, "email": "ALICE@example.com"}
        )

        assert response.status_code == 409
        assert response.json()["request_id"]

    async def test_register_weak_password(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/register", json={**REGISTER, "password": "password123"}
        )
        assert response.status_code == 422

    async def test_login_and_me(self, client: AsyncClient):
        await register(client)

        response = await client.post(
            "/api/v1/auth/login", json={"email": "alice@example.com", "password": STRONG_PASSWORD}
        )
        assert response.status_code == 200
        tokens = response.json()
        assert tokens["user"]["last_login_at"] is not None

        me = await client.get("/api/v1/auth/me", headers=bearer(tokens["access_token"]))
        assert me.status_code == 200
        assert me.json()["email"] == "alice@example.com"

    async def test_login_wrong_password(self, client: AsyncClient):
        await register(client)

        response = await client.post(
            "/api/v1/auth/login", json={"email": "alice@example.com", "password": "nope"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    async def test_me_requires_access_token(self, client: AsyncClient):
        tokens = await register(client)

        assert (await client.get("/api/v1/auth/me")).status_code == 401
        refresh_as_access = await client.get(
            "/api/v1/auth/me", headers=bearer(tokens["refresh_token"])
        )
        assert refresh_as_access.status_code == 401

    async def test_refresh(self, client: AsyncClient):
        tokens = await register(client)

        response = await client.post(
            "/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert response.status_code == 200
        me = await client.get("/api/v1/auth/me", headers=bearer(response.json()["access_token"]))
        assert me.status_code == 200

        rejected = await client.post(
            "/api/v1/auth/refresh", json={"refresh_token": tokens["access_token"]}
        )
        assert rejected.status_code == 401


class TestEmailVerification:
    async def test_verify_with_emailed_code(self, client: AsyncClient, mailer: RecordingMailer):
        tokens = await register(client)
        code = mailer.last(MailKind.VERIFY_EMAIL).data["code"]
        headers = bearer(tokens["access_token"])

        response = await client.post(
            "/api/v1/auth/verify-email", json={"code": code}, headers=headers
        )
        assert response.status_code == 200

        me = await client.get("/api/v1/auth/me", headers=headers)
        assert me.json()["email_verified"] is True

        again = await client.post("/api/v1/auth/verify-email", json={"code": code}, headers=headers)
        assert again.status_code == 400

        resend = await client.post("/api/v1/auth/resend-verification", headers=headers)
        assert resend.status_code == 409

    async def test_malformed_code(self, client: AsyncClient):
        tokens = await register(client)

        response = await client.post(
            "/api/v1/auth/verify-email",
            json={"code": "12ab56"},
            headers=bearer(tokens["access_token"]),
        )

        assert response.status_code == 422

    async def test_resend_failure_reported(self, client: AsyncClient, mailer: RecordingMailer):
        tokens = await register(client)
        mailer.fail = True

        response = await client.post(
            "/api/v1/auth/resend-verification", headers=bearer(tokens["access_token"])
        )

        assert response.status_code == 503


class TestPasswordReset:
    async def test_forgot_and_reset(self, client: AsyncClient, mailer: RecordingMailer):
        await register(client)

        forgot = await client.post(
            "/api/v1/auth/forgot-password", json={"email": "alice@example.com"}
        )
        assert forgot.status_code == 200
        token = mailer.last(MailKind.RESET_PASSWORD).data["token"]

        new_password = "tangerine-submarine-orchestra-7"
        reset = await client.post(
            f"/api/v1/auth/reset-password/{token}", json={"password": new_password}
        )
        assert reset.status_code == 200

        login = await client.post(
            "/api/v1/auth/login", json={"email": "alice@example.com", "password": new_password}
        )
        assert login.status_code == 200

        reused = await client.post(
            f"/api/v1/auth/reset-password/{token}", json={"password": STRONG_PASSWORD}
        )
        assert reused.status_code == 400

    async def test_forgot_unknown_email_looks_the_same(
        self, client: AsyncClient, mailer: RecordingMailer
    ):
        response = await client.post(
            "/api/v1/auth/forgot-password", json={"email": "nobody@example.com"}
        )

        assert response.status_code == 200
        assert mailer.sent == []


class TestOAuthCallback:
    @pytest.fixture
    def google(self, app) -> StubOAuthProvider:
        provider = StubOAuthProvider(
            OAuthProviderName.GOOGLE,
            {
                "code-1": OAuthProfile(
                    provider_id="g-bob", email="bob@example.com", given_name="Bob"
                )
            },
        )
        app.state.oauth_providers = {OAuthProviderName.GOOGLE: provider}
        return provider

    async def test_first_and_repeat_sign_in(self, client: AsyncClient, google):
        first = await client.get("/api/v1/auth/google/callback", params={"code": "code-1"})
        assert first.status_code == 200
        assert first.json()["created"] is True
        assert first.json()["user"]["has_password"] is False
        assert first.json()["user"]["email_verified"] is True

        second = await client.get("/api/v1/auth/google/callback", params={"code": "code-1"})
        assert second.json()["created"] is False
        assert second.json()["user"]["id"] == first.json()["user"]["id"]

        password_login = await client.post(
            "/api/v1/auth/login",
            json={"email": "bob@example.com", "password": DEFAULT_TEST_PASSWORD},
        )
        assert password_login.status_code == 401

    async def test_rejected_code(self, client: AsyncClient, google):
        response = await client.get("/api/v1/auth/google/callback", params={"code": "bad"})
        assert response.status_code == 401

    async def test_unconfigured_provider(self, client: AsyncClient, google):
        response = await client.get("/api/v1/auth/linkedin/callback", params={"code": "code-1"})
        assert response.status_code == 404

    async def test_unknown_provider(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/github/callback", params={"code": "code-1"})
        assert response.status_code == 422


class TestPlumbing:
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["database"] == "healthy"

    async def test_errors_carry_request_id_header(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json()["request_id"] == response.headers["X-Request-ID"]

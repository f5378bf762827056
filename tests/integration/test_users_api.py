"""End-to-end tests for profile, password, preference and onboarding endpoints."""

import pytest
from httpx import AsyncClient

from tests.factories import DEFAULT_TEST_PASSWORD
from tests.helpers import STRONG_PASSWORD, auth_headers

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


@pytest.fixture
async def user(make_user):
    return await make_user(email="grace@example.com", first_name="Grace", last_name="Hopper")


@pytest.fixture
def headers(user, token_service):
    return auth_headers(token_service, user.id)


class TestProfile:
    async def test_get_and_update(self, client: AsyncClient, headers):
        profile = await client.get("/api/v1/users/profile", headers=headers)
        assert profile.json()["first_name"] == "Grace"

        updated = await client.patch(
            "/api/v1/users/profile",
            json={"last_name": "Murray", "mobile_number": "+15550100"},
            headers=headers,
        )
        assert updated.status_code == 200
        assert updated.json()["first_name"] == "Grace"
        assert updated.json()["last_name"] == "Murray"
        assert updated.json()["mobile_number"] == "+15550100"

    async def test_empty_name_rejected(self, client: AsyncClient, headers):
        response = await client.patch(
            "/api/v1/users/profile", json={"first_name": ""}, headers=headers
        )
        assert response.status_code == 422


class TestPassword:
    async def test_change_password(self, client: AsyncClient, headers):
        response = await client.put(
            "/api/v1/users/password",
            json={"current_password": DEFAULT_TEST_PASSWORD, "new_password": STRONG_PASSWORD},
            headers=headers,
        )
        assert response.status_code == 200

        login = await client.post(
            "/api/v1/auth/login",
            json={"email": "grace@example.com", "password": STRONG_PASSWORD},
        )
        assert login.status_code == 200

    async def test_wrong_current_password(self, client: AsyncClient, headers):
        response = await client.put(
            "/api/v1/users/password",
            json={"current_password": "not-it", "new_password": STRONG_PASSWORD},
            headers=headers,
        )
        assert response.status_code == 401


class TestPreferences:
    async def test_set_and_merge(self, client: AsyncClient, headers):
        await client.put(
            "/api/v1/users/preferences/notifications", json={"value": {"email": False}}, headers=headers
        )
        response = await client.put(
            "/api/v1/users/preferences/timezone", json={"value": "Europe/Berlin"}, headers=headers
        )

        assert response.status_code == 200
        assert response.json()["preferences"] == {
            "notifications": {"email": False},
            "timezone": "Europe/Berlin",
        }

    async def test_requires_auth(self, client: AsyncClient):
        response = await client.put("/api/v1/users/preferences/theme", json={"value": "dark"})
        assert response.status_code == 401


class TestOnboarding:
    async def test_full_flow(self, client: AsyncClient, headers):
        status = await client.get("/api/v1/users/onboarding/status", headers=headers)
        assert status.json()["step"] == 1
        assert status.json()["completed"] is False

        answers = [
            ("workspace-type", {"workspace_type": "team"}),
            ("theme", {"theme": "dark"}),
            ("post-style", {"post_style": "short"}),
            ("post-frequency", {"post_frequency": 5}),
            ("language", {"language": "german"}),
            ("user-info", {"first_name": "Grace", "last_name": "Hopper"}),
            ("website-link", {"website_link": "https://grace.example.com"}),
            ("inspiration-profiles", {"inspiration_profiles": ["@ada"]}),
            ("step", {"step": 7}),
        ]
        for path, body in answers:
            response = await client.put(
                f"/api/v1/users/onboarding/{path}", json=body, headers=headers
            )
            assert response.status_code == 200, path

        assert response.json()["step"] == 7
        assert response.json()["data"]["post_style"] == "short"

        completed = await client.post(
            "/api/v1/users/onboarding/complete",
            json={"workspace_name": "Grace Media"},
            headers=headers,
        )
        assert completed.status_code == 201
        workspace_id = completed.json()["workspace_id"]

        detail = await client.get(f"/api/v1/workspaces/{workspace_id}", headers=headers)
        assert detail.json()["type"] == "team"
        assert detail.json()["preferred_theme"] == "dark"
        assert detail.json()["default_language"] == "german"
        assert detail.json()["access_level"] == "owner"

        final = await client.get("/api/v1/users/onboarding/status", headers=headers)
        assert final.json()["completed"] is True
        assert final.json()["status"] == "completed"

        again = await client.post(
            "/api/v1/users/onboarding/complete",
            json={"workspace_name": "Second"},
            headers=headers,
        )
        assert again.status_code == 409

    async def test_invalid_answer(self, client: AsyncClient, headers):
        response = await client.put(
            "/api/v1/users/onboarding/theme", json={"theme": "neon"}, headers=headers
        )

        assert response.status_code == 400
        assert response.json()["request_id"]

    async def test_step_out_of_range(self, client: AsyncClient, headers):
        response = await client.put(
            "/api/v1/users/onboarding/step", json={"step": 42}, headers=headers
        )
        assert response.status_code == 400

    async def test_complete_needs_name(self, client: AsyncClient, headers):
        await client.put(
            "/api/v1/users/onboarding/workspace-type",
            json={"workspace_type": "individual"},
            headers=headers,
        )

        response = await client.post(
            "/api/v1/users/onboarding/complete", json={}, headers=headers
        )
        assert response.status_code == 400

    async def test_unverified_user_can_onboard(self, client: AsyncClient, make_user, token_service):
        user = await make_user(email_verified=False, email_verified_at=None)

        response = await client.put(
            "/api/v1/users/onboarding/theme",
            json={"theme": "light"},
            headers=auth_headers(token_service, user.id),
        )
        assert response.status_code == 200

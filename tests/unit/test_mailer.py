"""Tests for email rendering and delivery."""

import pytest
import resend

from src.scribe.core.config import Settings
from src.scribe.core.notifications import MailKind, Mailer, render_email

pytestmark = pytest.mark.unit


class TestRenderEmail:
    def test_verification_email_shows_code(self, settings: Settings):
        subject, body = render_email(
            settings, MailKind.VERIFY_EMAIL, {"name": "Alice", "code": "123456"}
        )
        assert subject == "Verify your email address"
        assert "123456" in body
        assert "Hi Alice" in body

    def test_reset_email_links_to_app(self, settings: Settings):
        _, body = render_email(
            settings, MailKind.RESET_PASSWORD, {"name": "Alice", "token": "tok123"}
        )
        assert f"{settings.app_url}/reset-password/tok123" in body

    def test_invite_email(self, settings: Settings):
        subject, body = render_email(
            settings,
            MailKind.WORKSPACE_INVITE,
            {
                "workspace_name": "Acme",
                "inviter_name": "Olive Owner",
                "role": "writer",
                "token": "inv456",
            },
        )
        assert subject == "You've been invited to join Acme"
        assert "Olive Owner" in body
        assert "as a writer" in body
        assert "accept-invite?token=inv456" in body

    def test_user_values_are_escaped(self, settings: Settings):
        _, body = render_email(
            settings,
            MailKind.WORKSPACE_INVITE,
            {"workspace_name": "<script>x</script>", "inviter_name": "A&B", "token": "t"},
        )
        assert "<script>" not in body
        assert "&lt;script&gt;" in body
        assert "A&amp;B" in body


class TestMailer:
    async def test_without_api_key_mail_is_logged_not_sent(self, settings: Settings, monkeypatch):
        def _fail(params):
            raise AssertionError("must not call Resend")

        monkeypatch.setattr(resend.Emails, "send", _fail)
        mailer = Mailer(settings.model_copy(update={"resend_api_key": None}))

        assert await mailer.send(MailKind.VERIFY_EMAIL, "a@example.com", {"code": "123456"})

    async def test_sends_through_resend(self, settings: Settings, monkeypatch):
        calls = []

        def _send(params):
            calls.append(params)
            return {"id": "email-1"}

        monkeypatch.setattr(resend.Emails, "send", _send)
        mailer = Mailer(settings.model_copy(update={"resend_api_key": "re_test_key"}))

        sent = await mailer.send(MailKind.VERIFY_EMAIL, "a@example.com", {"code": "654321"})

        assert sent is True
        assert len(calls) == 1
        assert calls[0]["to"] == ["a@example.com"]
        assert calls[0]["from"] == settings.email_from
        assert "654321" in calls[0]["html"]

    async def test_provider_error_reported_as_false(self, settings: Settings, monkeypatch):
        def _boom(params):
            raise RuntimeError("provider down")

        monkeypatch.setattr(resend.Emails, "send", _boom)
        mailer = Mailer(settings.model_copy(update={"resend_api_key": "re_test_key"}))

        assert await mailer.send(MailKind.VERIFY_EMAIL, "a@example.com", {"code": "1"}) is False

    async def test_incomplete_payload_reported_as_false(self, settings: Settings):
        mailer = Mailer(settings)
        assert await mailer.send(MailKind.RESET_PASSWORD, "a@example.com", {"name": "A"}) is False

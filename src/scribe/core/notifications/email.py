"""Email delivery using the Resend API."""

import asyncio
import html
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Any

import resend

from src.scribe.core.config import Settings
from src.scribe.core.logging import get_logger

logger = get_logger(__name__)

# Thread pool for email sending with timeout support
_email_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="email_sender")

# Shared email styles
_BODY_STYLE = (
    "font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; "
    "line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;"
)
_BUTTON_STYLE = (
    "background-color: #2563eb; color: white; padding: 12px 24px; "
    "text-decoration: none; border-radius: 6px; display: inline-block; font-weight: 500;"
)
_CODE_STYLE = (
    "font-size: 32px; font-weight: 700; letter-spacing: 8px; color: #111; "
    "background-color: #f3f4f6; padding: 16px 24px; border-radius: 6px; display: inline-block;"
)
_LINK_STYLE = "color: #2563eb; word-break: break-all;"
_MUTED_STYLE = "color: #666; font-size: 14px;"


class MailKind(str, Enum):
    """Templates the mailer knows how to render."""

    VERIFY_EMAIL = "verify-email"
    RESET_PASSWORD = "reset-password"
    WORKSPACE_INVITE = "workspace-invite"


def _wrap(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="{_BODY_STYLE}">
    <h1 style="color: #2563eb; margin-bottom: 24px;">{title}</h1>
{body}
</body>
</html>"""


def _render_verify_email(settings: Settings, data: Mapping[str, Any]) -> tuple[str, str]:
    safe_name = html.escape(str(data.get("name") or "there"))
    safe_code = html.escape(str(data["code"]))
    body = f"""    <p>Hi {safe_name},</p>
    <p>Thanks for signing up! Enter this code to verify your email address:</p>
    <p style="margin: 32px 0;"><span style="{_CODE_STYLE}">{safe_code}</span></p>
    <p style="{_MUTED_STYLE} margin-top: 32px;">
        This code will expire in {settings.email_verification_expire_minutes} minutes.
        If you didn't create an account, you can safely ignore this email.
    </p>"""
    return "Verify your email address", _wrap("Verify your email", body)


def _render_reset_password(settings: Settings, data: Mapping[str, Any]) -> tuple[str, str]:
    safe_name = html.escape(str(data.get("name") or "there"))
    reset_url = html.escape(f"{settings.app_url}/reset-password/{data['token']}")
    body = f"""    <p>Hi {safe_name},</p>
    <p>We received a request to reset your password. Click below to choose a new one:</p>
    <p style="margin: 32px 0;">
        <a href="{reset_url}" style="{_BUTTON_STYLE}">Reset Password</a>
    </p>
    <p style="{_MUTED_STYLE}">
        Or copy and paste this link into your browser:<br>
        <a href="{reset_url}" style="{_LINK_STYLE}">{reset_url}</a>
    </p>
    <p style="{_MUTED_STYLE} margin-top: 32px;">
        This link will expire in {settings.password_reset_expire_minutes} minutes.
        If you didn't request a reset, you can safely ignore this email.
    </p>"""
    return "Reset your password", _wrap("Reset your password", body)


def _render_workspace_invite(settings: Settings, data: Mapping[str, Any]) -> tuple[str, str]:
    workspace_name = str(data["workspace_name"])
    safe_workspace_name = html.escape(workspace_name)
    safe_inviter_name = html.escape(str(data.get("inviter_name") or "A teammate"))
    safe_role = html.escape(str(data.get("role") or "member"))
    invite_url = html.escape(f"{settings.app_url}/accept-invite?token={data['token']}")
    body = f"""    <p>{safe_inviter_name} has invited you to join <strong>{safe_workspace_name}</strong>
    as a {safe_role}.</p>
    <p>Click the button below to accept the invitation:</p>
    <p style="margin: 32px 0;">
        <a href="{invite_url}" style="{_BUTTON_STYLE}">Accept Invitation</a>
    </p>
    <p style="{_MUTED_STYLE}">
        Or copy and paste this link into your browser:<br>
        <a href="{invite_url}" style="{_LINK_STYLE}">{invite_url}</a>
    </p>
    <p style="{_MUTED_STYLE} margin-top: 32px;">
        This invitation will expire in {settings.invite_expire_days} days.
        If you didn't expect this invitation, you can safely ignore this email.
    </p>"""
    return f"You've been invited to join {workspace_name}", _wrap("You're invited!", body)


_RENDERERS: dict[MailKind, Callable[[Settings, Mapping[str, Any]], tuple[str, str]]] = {
    MailKind.VERIFY_EMAIL: _render_verify_email,
    MailKind.RESET_PASSWORD: _render_reset_password,
    MailKind.WORKSPACE_INVITE: _render_workspace_invite,
}


def render_email(settings: Settings, kind: MailKind, data: Mapping[str, Any]) -> tuple[str, str]:
    """Render ``(subject, html)`` for a mail kind."""
    return _RENDERERS[kind](settings, data)


class Mailer:
    """Sends templated emails through Resend.

    Constructed once at startup. ``send`` never raises: delivery problems are
    logged and reported as ``False`` so callers can carry on.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def _log_target(self, to: str) -> str | None:
        return to if self.settings.log_user_emails else None

    async def send(self, kind: MailKind, to: str, data: Mapping[str, Any]) -> bool:
        """Send one email.

        Returns:
            True if email was sent (or logged in dev mode), False on error
        """
        try:
            subject, body_html = render_email(self.settings, kind, data)
        except KeyError as e:
            logger.error("Email payload incomplete", email_type=kind.value, missing=str(e))
            return False

        if not self.settings.resend_api_key:
            # Dev mode: log email instead of sending
            logger.warning(
                "RESEND_API_KEY not set - email not sent",
                to=self._log_target(to),
                email_type=kind.value,
            )
            return True

        resend.api_key = self.settings.resend_api_key
        params: resend.Emails.SendParams = {
            "from": self.settings.email_from,
            "to": [to],
            "subject": subject,
            "html": body_html,
        }

        try:
            # Thread pool with timeout so a slow API never holds the request
            future = _email_executor.submit(resend.Emails.send, params)
            await asyncio.wait_for(
                asyncio.wrap_future(future),
                timeout=self.settings.email_send_timeout_seconds,
            )
        except TimeoutError:
            logger.error(
                "Email send timed out",
                email_type=kind.value,
                timeout=self.settings.email_send_timeout_seconds,
            )
            return False
        except Exception as e:
            logger.error("Failed to send email", email_type=kind.value, error=str(e))
            return False

        logger.info("Email sent", email_type=kind.value, to=self._log_target(to))
        return True

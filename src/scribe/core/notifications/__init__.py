"""Notification utilities - email."""

from src.scribe.core.notifications.email import MailKind, Mailer, render_email

__all__ = [
    "MailKind",
    "Mailer",
    "render_email",
]

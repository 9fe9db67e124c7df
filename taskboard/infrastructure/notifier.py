"""Invitee Notifier — outbound invitation mail over SMTP.

Invariants:
    - send_invitation may raise; the ledger treats any failure as non-fatal
    - The accept link is <app_base_url>/invitations/<token>
    - Tokens appear only in the mail body, never in log records

Design Decisions:
    - stdlib smtplib in a worker thread (asyncio.to_thread): blocking client kept off the event loop
    - LogOnlyNotifier when SMTP is not configured: local development needs no mail server
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from taskboard.config import Settings, get_settings
from taskboard.core.repository_protocols import InviteeNotifier

logger = logging.getLogger(__name__)


def build_invitation_message(
    sender: str, email: str, board_title: str, accept_url: str, ttl_days: int,
) -> EmailMessage:
    message = EmailMessage()
    message["Subject"] = f'You\'re invited to collaborate on "{board_title}"'
    message["From"] = sender
    message["To"] = email
    message.set_content(
        "Board Collaboration Invitation\n\n"
        f"You've been invited to collaborate on the board: {board_title}\n\n"
        f"Accept the invitation here:\n{accept_url}\n\n"
        f"This invitation will expire in {ttl_days} days.\n"
        "If you didn't expect this invitation, you can safely ignore this email.\n"
    )
    return message


class SmtpInviteeNotifier:
    """Sends invitation mail through the configured SMTP relay."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def accept_url(self, token: str) -> str:
        return f"{self.settings.app_base_url.rstrip('/')}/invitations/{token}"

    async def send_invitation(
        self, email: str, board_title: str, token: str,
    ) -> None:
        message = build_invitation_message(
            self.settings.smtp_from, email, board_title,
            self.accept_url(token), self.settings.invitation_ttl_days,
        )
        await asyncio.to_thread(self._send_sync, message)
        logger.info(f"Invitation mail sent for board '{board_title}'")

    def _send_sync(self, message: EmailMessage) -> None:
        s = self.settings
        with smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=s.smtp_timeout_seconds) as smtp:
            if s.smtp_starttls:
                smtp.starttls()
            if s.smtp_user:
                smtp.login(s.smtp_user, s.smtp_password)
            smtp.send_message(message)


class LogOnlyNotifier:
    """Records that an invitation would have been sent."""

    async def send_invitation(
        self, email: str, board_title: str, token: str,
    ) -> None:
        logger.info(f"SMTP not configured, skipping invitation mail for board '{board_title}'")


def get_notifier() -> InviteeNotifier:
    """FastAPI dependency selecting the notifier from settings."""
    settings = get_settings()
    if settings.smtp_configured:
        return SmtpInviteeNotifier(settings)
    return LogOnlyNotifier()

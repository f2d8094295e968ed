# =============================================================================
# lib/email_client.py - Transactional Email Sender (Resend)
# =============================================================================
# Sends rendered emails through the Resend HTTP API using httpx.
#
# When RESEND_API_KEY is not configured the send is skipped with a warning,
# so local development works without an email account.
#
# Usage:
#   from lib.email_client import EmailClient
#   result = EmailClient.send(message)
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from app.config import settings
from app.exceptions import DependencyError
from core.models.notification import EmailMessage

logger = logging.getLogger(__name__)

SEND_TIMEOUT_SECONDS = 10


class EmailSendError(DependencyError):
    """Raised when the email provider rejects or fails a send."""

    def __init__(self, error: str, recipients: list[str] | None = None):
        super().__init__(
            f"Email send failed: {error}",
            public_message="Failed to send notification",
            code="EMAIL_SEND_FAILED",
            details={"recipients": recipients or []},
        )


@dataclass(frozen=True)
class EmailResult:
    """Outcome of one send."""
    sent: bool
    email_id: str | None = None
    skipped_reason: str | None = None


class EmailClient:
    """
    Thin Resend client.

    All methods are class methods, mirroring SupabaseClient.
    """

    @classmethod
    def is_configured(cls) -> bool:
        return bool(settings.RESEND_API_KEY)

    @classmethod
    def send(cls, message: EmailMessage) -> EmailResult:
        """
        Send one email.

        Args:
            message: Rendered email

        Returns:
            EmailResult with the provider's message id, or a skipped result
            when no API key is configured

        Raises:
            EmailSendError: If the request fails or Resend returns an error
        """
        if not cls.is_configured():
            logger.warning("[Email] RESEND_API_KEY not configured, skipping email")
            return EmailResult(sent=False, skipped_reason="Email not configured")

        payload = {
            "from": settings.EMAIL_FROM,
            "to": message.to,
            "subject": message.subject,
            "html": message.html,
            "text": message.text,
        }
        if message.reply_to:
            payload["reply_to"] = message.reply_to

        try:
            response = httpx.post(
                settings.RESEND_API_URL,
                json=payload,
                headers={"Authorization": f"Bearer {settings.RESEND_API_KEY}"},
                timeout=SEND_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"[Email] Send error: {e.response.status_code} {e.response.text[:200]}")
            raise EmailSendError(f"HTTP {e.response.status_code}", message.to)
        except httpx.HTTPError as e:
            logger.error(f"[Email] Unexpected error: {e}")
            raise EmailSendError(str(e), message.to)

        email_id = response.json().get("id")
        logger.info(f"[Email] Sent successfully: {email_id}")
        return EmailResult(sent=True, email_id=email_id)

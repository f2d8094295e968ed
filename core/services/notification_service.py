# =============================================================================
# core/services/notification_service.py - Client Notifications
# =============================================================================
# Renders one transactional email per project event and hands it off for
# delivery. By default delivery is a Celery task (workers.tasks); with
# NOTIFICATIONS_INLINE=true it is sent inside the request instead.
#
# Notification failures never touch project state: callers that change a
# status catch NotificationFailedError and carry on.
# =============================================================================

import logging
from datetime import datetime
from typing import Any

from app.config import settings
from app.exceptions import NotificationFailedError, ProjectNotFoundError
from core.models.notification import EmailMessage, NotificationKind, NotificationResult
from core.models.project import ProjectContact
from lib import email_templates
from lib.email_client import EmailClient, EmailSendError
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

DEFAULT_REJECTION_REASON = "Payment could not be verified"


class NotificationService:
    """
    Service for client notification emails.

    Example:
        NotificationService.notify_status_change(
            project_id,
            NotificationKind.PAYMENT_REJECTED,
            {"rejection_reason": "Blurry screenshot"},
        )
    """

    @staticmethod
    def tracking_url(tracking_token: str) -> str:
        return f"{settings.tracking_base_url}/{tracking_token}"

    @staticmethod
    def render(
        kind: NotificationKind,
        contact: ProjectContact,
        payload: dict[str, Any] | None = None,
    ) -> EmailMessage:
        """
        Render the email for `kind` addressed to the project's client.

        Payload keys by kind:
        - payment_validated: amount_validated (default 0)
        - payment_rejected: rejection_reason (default "Payment could not be verified")
        - submission_confirmation: deadline, agreed_price (optional)
        """
        payload = payload or {}
        url = NotificationService.tracking_url(contact.tracking_token)

        if kind == NotificationKind.COMPLETION:
            subject, html = email_templates.project_completion_email(
                client_name=contact.client_name,
                reference_code=contact.reference_code,
                topic=contact.topic,
                tracking_url=url,
            )
        elif kind == NotificationKind.PAYMENT_VALIDATED:
            subject, html = email_templates.payment_validated_email(
                client_name=contact.client_name,
                reference_code=contact.reference_code,
                amount_validated=float(payload.get("amount_validated") or 0),
                tracking_url=url,
            )
        elif kind == NotificationKind.PAYMENT_REJECTED:
            subject, html = email_templates.payment_rejected_email(
                client_name=contact.client_name,
                reference_code=contact.reference_code,
                rejection_reason=payload.get("rejection_reason") or DEFAULT_REJECTION_REASON,
                tracking_url=url,
            )
        elif kind == NotificationKind.SUBMISSION_CONFIRMATION:
            deadline = payload.get("deadline")
            if isinstance(deadline, str):
                deadline = datetime.fromisoformat(deadline.replace("Z", "+00:00"))
            subject, html = email_templates.submission_confirmation_email(
                client_name=contact.client_name,
                reference_code=contact.reference_code,
                topic=contact.topic,
                tracking_url=url,
                deadline=deadline,
                agreed_price=payload.get("agreed_price"),
            )
        else:
            raise ValueError(f"Unknown notification kind: {kind}")

        return EmailMessage(
            to=[contact.client_email],
            subject=subject,
            html=html,
            text=email_templates.strip_html(html),
        )

    @staticmethod
    def dispatch(kind: NotificationKind, project_id: str, message: EmailMessage) -> NotificationResult:
        """
        Hand a rendered email off for delivery.

        Raises:
            NotificationFailedError: If queueing (or the inline send) fails
        """
        result = NotificationResult(kind=kind, project_id=project_id)

        if settings.NOTIFICATIONS_INLINE:
            try:
                outcome = EmailClient.send(message)
            except EmailSendError as e:
                raise NotificationFailedError(e.message, project_id)
            result.sent = outcome.sent
            result.email_id = outcome.email_id
            return result

        try:
            from workers.tasks import send_notification_email

            task = send_notification_email.delay(kind.value, project_id, message.model_dump())
        except Exception as e:
            logger.error(f"Failed to queue {kind.value} notification for project {project_id}: {e}")
            raise NotificationFailedError(str(e), project_id)

        logger.info(f"Queued {kind.value} notification for project {project_id} [{task.id}]")
        result.task_id = task.id
        return result

    @staticmethod
    def notify_status_change(
        project_id: str,
        kind: NotificationKind,
        payload: dict[str, Any] | None = None,
    ) -> NotificationResult:
        """
        Send exactly one email about a project event.

        Args:
            project_id: Project UUID
            kind: Which event happened
            payload: Kind-specific values (see render)

        Returns:
            NotificationResult with task_id (queued) or sent flag (inline)

        Raises:
            ProjectNotFoundError: If the project doesn't exist
            SupabaseClientError: If the lookup fails
            NotificationFailedError: If the email couldn't be handed off
        """
        contact = SupabaseClient.fetch_project_contact(project_id)
        if contact is None:
            raise ProjectNotFoundError(project_id)

        message = NotificationService.render(kind, contact, payload)
        return NotificationService.dispatch(kind, project_id, message)

    @staticmethod
    def notify_quietly(
        project_id: str,
        kind: NotificationKind,
        payload: dict[str, Any] | None = None,
    ) -> NotificationResult | None:
        """
        Fire-and-forget variant for callers mid-transition.

        Any failure is logged and swallowed so the triggering change stands.
        """
        try:
            return NotificationService.notify_status_change(project_id, kind, payload)
        except Exception as e:
            logger.error(f"Failed to send {kind.value} notification for project {project_id}: {e}")
            return None

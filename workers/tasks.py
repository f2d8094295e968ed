# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Defines background tasks for transactional email.
#
# Tasks:
# - send_notification_email: Deliver one rendered client notification
#
# The API renders the email and hands it off here, so a slow or failing
# email provider never blocks or rolls back the status change that
# triggered it. Outcomes are visible through GET /api/v1/tasks/{task_id}.
# =============================================================================

import logging
from typing import Any

from celery import shared_task

logger = logging.getLogger(__name__)


# =============================================================================
# Notification Task
# =============================================================================

@shared_task(bind=True, name="workers.tasks.send_notification_email")
def send_notification_email(
    self,
    kind: str,
    project_id: str,
    message: dict[str, Any],
) -> dict[str, Any]:
    """
    Send one client notification email.

    Args:
        kind: NotificationKind value (for logging and the result)
        project_id: Project the notification is about
        message: Serialized EmailMessage

    Returns:
        Dict with:
        - success: bool
        - kind / project_id: echoed for task-status consumers
        - email_id: Provider message id (if sent)
        - skipped: Reason the send was skipped (if not configured)
        - error: Error description (if the send failed)

    No retries: a failed send is reported, and callers re-trigger explicitly.
    """
    logger.info(f"Sending {kind} notification for project {project_id}")

    from core.models.notification import EmailMessage
    from lib.email_client import EmailClient, EmailSendError

    result: dict[str, Any] = {"kind": kind, "project_id": project_id}

    try:
        email = EmailMessage.model_validate(message)
        outcome = EmailClient.send(email)

    except EmailSendError as e:
        logger.error(f"Notification {kind} for project {project_id} failed: {e.message}")
        return {**result, "success": False, "error": e.public_message}

    except Exception as e:
        logger.exception(f"Notification task failed: {e}")
        return {**result, "success": False, "error": "Failed to send notification"}

    if not outcome.sent:
        return {**result, "success": True, "skipped": outcome.skipped_reason}

    return {**result, "success": True, "email_id": outcome.email_id}

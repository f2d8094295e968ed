# =============================================================================
# core/models/notification.py - Notification Schemas
# =============================================================================
# A notification is one rendered email for one project event. The API
# renders it and hands the EmailMessage to a Celery worker, so the payload
# must stay JSON-serializable.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, Field


class NotificationKind(str, Enum):
    """Project events that send a client email."""
    SUBMISSION_CONFIRMATION = "submission_confirmation"
    COMPLETION = "completion"
    PAYMENT_VALIDATED = "payment_validated"
    PAYMENT_REJECTED = "payment_rejected"


class PaymentAction(str, Enum):
    VALIDATED = "validated"
    REJECTED = "rejected"

    @property
    def notification_kind(self) -> NotificationKind:
        if self is PaymentAction.VALIDATED:
            return NotificationKind.PAYMENT_VALIDATED
        return NotificationKind.PAYMENT_REJECTED


class EmailMessage(BaseModel):
    """A fully rendered transactional email."""
    to: list[str] = Field(..., min_length=1)
    subject: str
    html: str
    text: str
    reply_to: str | None = None


class NotificationResult(BaseModel):
    """
    Outcome of handing a notification off.

    `task_id` is set when the email was queued; `sent` is set when it was
    delivered inline.
    """
    kind: NotificationKind
    project_id: str
    task_id: str | None = None
    sent: bool = False
    email_id: str | None = None

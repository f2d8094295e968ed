# =============================================================================
# app/routers/notifications.py - Notification Trigger Endpoints
# =============================================================================
# Called by the staff dashboard after a project event to email the client.
# Each call renders one email and queues it for the notification worker;
# the returned task_id can be polled at /api/v1/tasks/{task_id}.
# =============================================================================

import logging
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from app.exceptions import (
    DependencyError,
    InvalidRequestError,
    MissingFieldError,
    StartpointException,
    route_failure,
)
from core.models.notification import NotificationKind, NotificationResult, PaymentAction
from core.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Request/Response Models
# =============================================================================

class CompletionNotificationRequest(BaseModel):
    projectId: Any = Field(default=None, example="550e8400-e29b-41d4-a716-446655440000")


class PaymentNotificationRequest(BaseModel):
    """Payment review outcome; rejectionReason only matters when rejected."""
    projectId: Any = Field(default=None, example="550e8400-e29b-41d4-a716-446655440000")
    action: Any = Field(default=None, example="validated")
    rejectionReason: str | None = Field(default=None, example="Screenshot is unreadable")
    amountValidated: float | None = Field(default=None, example=1500)


class NotificationResponse(BaseModel):
    success: bool = True
    task_id: str | None = None


def _send(project_id: str, kind: NotificationKind, payload: dict[str, Any] | None = None) -> NotificationResult:
    try:
        return NotificationService.notify_status_change(project_id, kind, payload)
    except DependencyError as e:
        raise route_failure(e, "Failed to send notification")
    except StartpointException:
        raise
    except Exception as e:
        raise route_failure(e, "Failed to send notification")


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/completion", response_model=NotificationResponse)
async def notify_completion(body: CompletionNotificationRequest):
    """
    Email the client that their project is complete.

    The email links to the tracking page where files can be downloaded
    after PIN verification.
    """
    if not body.projectId:
        raise MissingFieldError("Missing project ID", fields=["projectId"])

    result = _send(str(body.projectId), NotificationKind.COMPLETION)
    return NotificationResponse(success=True, task_id=result.task_id)


@router.post("/payment", response_model=NotificationResponse)
async def notify_payment(body: PaymentNotificationRequest):
    """
    Email the client the outcome of a payment review.

    - validated: confirms the amount received
    - rejected: explains the reason and asks for a new proof of payment
    """
    if not body.projectId or not body.action:
        raise MissingFieldError(fields=[
            name for name, value in (("projectId", body.projectId), ("action", body.action))
            if not value
        ])

    try:
        action = PaymentAction(body.action)
    except ValueError:
        raise InvalidRequestError("Invalid action", code="INVALID_ACTION")

    payload: dict[str, Any] = {}
    if action == PaymentAction.VALIDATED:
        payload["amount_validated"] = body.amountValidated
    else:
        payload["rejection_reason"] = body.rejectionReason

    result = _send(str(body.projectId), action.notification_kind, payload)
    return NotificationResponse(success=True, task_id=result.task_id)

# =============================================================================
# core/models/project.py - Project Schemas
# =============================================================================
# These models define the project shapes used by the tracking flow:
# - ProjectStatus: lifecycle enum plus the allowed transition table
# - TrackedProject: minimal row needed by the tracking gate
# - ProjectContact: fields needed to address a notification
# - ProjectHistoryEntry: one row of the project timeline
# - ProjectSubmission: intake payload from the public form
#
# Supabase returns plain dicts; every row passes through one of these models
# at the data-access boundary so a malformed row fails loudly and early.
# =============================================================================

import re
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class ProjectStatus(str, Enum):
    """
    Possible states for a project.

    Flow: submitted -> pending_payment_validation -> validated -> assigned
          -> in_progress -> review -> complete -> paid
    Side paths: rejected (payment), review -> in_progress (revisions),
    cancelled (from any non-terminal status).
    """
    SUBMITTED = "submitted"
    PENDING_PAYMENT_VALIDATION = "pending_payment_validation"
    VALIDATED = "validated"
    REJECTED = "rejected"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    COMPLETE = "complete"
    PAID = "paid"
    CANCELLED = "cancelled"


# Statuses whose deliverables are visible to the client
COMPLETED_STATUSES: frozenset[str] = frozenset({
    ProjectStatus.COMPLETE.value,
    ProjectStatus.PAID.value,
})

TERMINAL_STATUSES: frozenset[ProjectStatus] = frozenset({
    ProjectStatus.PAID,
    ProjectStatus.CANCELLED,
})

STATUS_TRANSITIONS: dict[ProjectStatus, tuple[ProjectStatus, ...]] = {
    ProjectStatus.SUBMITTED: (ProjectStatus.PENDING_PAYMENT_VALIDATION,),
    ProjectStatus.PENDING_PAYMENT_VALIDATION: (ProjectStatus.VALIDATED, ProjectStatus.REJECTED),
    ProjectStatus.VALIDATED: (ProjectStatus.ASSIGNED,),
    ProjectStatus.REJECTED: (ProjectStatus.PENDING_PAYMENT_VALIDATION,),
    ProjectStatus.ASSIGNED: (ProjectStatus.IN_PROGRESS,),
    ProjectStatus.IN_PROGRESS: (ProjectStatus.REVIEW,),
    ProjectStatus.REVIEW: (ProjectStatus.COMPLETE, ProjectStatus.IN_PROGRESS),
    ProjectStatus.COMPLETE: (ProjectStatus.PAID,),
    ProjectStatus.PAID: (),
    ProjectStatus.CANCELLED: (),
}

STATUS_LABELS: dict[str, str] = {
    "submitted": "Submitted",
    "pending_payment_validation": "Payment Under Review",
    "validated": "Payment Verified",
    "rejected": "Payment Rejected",
    "assigned": "Writer Assigned",
    "in_progress": "In Progress",
    "review": "Under Review",
    "complete": "Complete",
    "paid": "Delivered",
    "cancelled": "Cancelled",
}


def can_transition(current: ProjectStatus | str, requested: ProjectStatus | str) -> bool:
    """
    Check whether a project may move from `current` to `requested`.

    Any non-terminal status may be cancelled. Unknown statuses never transition.
    """
    try:
        current = ProjectStatus(current)
        requested = ProjectStatus(requested)
    except ValueError:
        return False

    if requested == ProjectStatus.CANCELLED:
        return current not in TERMINAL_STATUSES
    return requested in STATUS_TRANSITIONS.get(current, ())


def is_completed_status(status: str) -> bool:
    """True when deliverables may be shown for a project in this status."""
    return status in COMPLETED_STATUSES


# =============================================================================
# Row Models
# =============================================================================

class TrackedProject(BaseModel):
    """
    Project row as seen by the tracking gate.

    Only identifiers, status and the phone used for the PIN are needed.
    Status is kept as a plain string so unknown values from the database
    simply fail the completed-status check.
    """
    id: str
    status: str
    tracking_token: str | None = None
    client_phone: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return str(value)


class ProjectContact(BaseModel):
    """Fields needed to address and fill a client notification."""
    id: str | None = None
    client_email: str
    client_name: str
    reference_code: str
    tracking_token: str
    topic: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return str(value) if value is not None else None


class ProjectSummary(BaseModel):
    """Public tracking view of a project (no contact details)."""
    id: str
    reference_code: str
    status: str
    topic: str | None = None
    deadline: datetime | None = None
    estimated_completion_at: datetime | None = None
    created_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return str(value)

    @property
    def status_label(self) -> str:
        return STATUS_LABELS.get(self.status, self.status)


class ProjectHistoryEntry(BaseModel):
    """One entry in a project's timeline."""
    id: str
    action: str
    old_status: str | None = None
    new_status: str | None = None
    notes: str | None = None
    created_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return str(value)


# =============================================================================
# Intake Models
# =============================================================================

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PH_MOBILE_PATTERN = re.compile(r"^09\d{9}$")


class ProjectSubmission(BaseModel):
    """
    Client intake payload.

    Example:
        {
            "topic": "Climate policy in Southeast Asia",
            "deadline": "2026-12-01T00:00:00Z",
            "expected_outputs": "Research paper, 10 pages",
            "client_name": "Dave Smith",
            "client_email": "dave@example.com",
            "client_phone": "09171234567",
            "package_id": "pkg-basic",
            "agreed_price": 1500
        }
    """
    topic: str = Field(..., min_length=1, max_length=500)
    deadline: datetime
    expected_outputs: str = Field(..., min_length=1)
    client_name: str = Field(..., min_length=1, max_length=200)
    client_email: str
    client_phone: str
    package_id: str = Field(..., min_length=1)
    agreed_price: float = Field(..., gt=0)
    special_instructions: str | None = None
    requirements: dict | None = None

    @field_validator("client_email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Invalid email format")
        return value

    @field_validator("client_phone")
    @classmethod
    def _check_phone(cls, value: str) -> str:
        if not PH_MOBILE_PATTERN.match(value):
            raise ValueError("Invalid Philippine mobile number")
        return value

    @field_validator("deadline")
    @classmethod
    def _check_deadline(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        if value <= datetime.now(timezone.utc):
            raise ValueError("Deadline must be in the future")
        return value

# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - project.py: Project status, transitions, row and intake schemas
# - files.py: Deliverable file and download link schemas
# - notification.py: Notification kinds and rendered email schemas
#
# These models define the "contract" between the database, API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Project Models - Lifecycle and tracking
# -----------------------------------------------------------------------------
from .project import (
    COMPLETED_STATUSES,
    STATUS_LABELS,
    STATUS_TRANSITIONS,
    ProjectContact,
    ProjectHistoryEntry,
    ProjectStatus,
    ProjectSubmission,
    ProjectSummary,
    TrackedProject,
    can_transition,
    is_completed_status,
)

# -----------------------------------------------------------------------------
# File Models - Deliverables
# -----------------------------------------------------------------------------
from .files import (
    DeliverableFile,
    DownloadLink,
    ProjectFileRef,
)

# -----------------------------------------------------------------------------
# Notification Models - Transactional email
# -----------------------------------------------------------------------------
from .notification import (
    EmailMessage,
    NotificationKind,
    NotificationResult,
    PaymentAction,
)

__all__ = [
    # Project
    "COMPLETED_STATUSES",
    "STATUS_LABELS",
    "STATUS_TRANSITIONS",
    "ProjectContact",
    "ProjectHistoryEntry",
    "ProjectStatus",
    "ProjectSubmission",
    "ProjectSummary",
    "TrackedProject",
    "can_transition",
    "is_completed_status",
    # Files
    "DeliverableFile",
    "DownloadLink",
    "ProjectFileRef",
    # Notification
    "EmailMessage",
    "NotificationKind",
    "NotificationResult",
    "PaymentAction",
]

# =============================================================================
# core/services/project_service.py - Project Business Logic
# =============================================================================
# Handles project creation (intake) and staff status transitions.
# Separates HTTP concerns from database/business logic.
#
# Reference codes are sequenced by counting this year's projects, then
# inserting. The two steps are not atomic: concurrent submissions in the
# same year can receive the same code. A unique constraint on
# projects.reference_code turns that race into a failed insert.
# =============================================================================

import json
import logging
from datetime import datetime, timezone
from typing import Any

from app.config import settings
from app.exceptions import InvalidStatusTransitionError, ProjectNotFoundError
from core.models.notification import NotificationKind
from core.models.project import ProjectStatus, ProjectSubmission, can_transition
from core.services.notification_service import NotificationService
from lib.codes import format_reference_code, generate_tracking_token
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


class ProjectService:
    """
    Service for project lifecycle operations.

    The tracking flow only reads projects; these are the writes that
    create them and move them through their statuses.
    """

    @staticmethod
    def issue_reference_code(now: datetime | None = None) -> str:
        """
        Compute the next reference code for the current year.

        Counts projects created on/after Jan 1 (UTC) of `now`'s year and
        returns PREFIX-YEAR-<count+1, zero-padded to 5>.

        Args:
            now: Point in time to issue for (defaults to now, UTC)

        Returns:
            Reference code, e.g. "SA-2026-00042"
        """
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        else:
            now = now.astimezone(timezone.utc)
        year_start = datetime(now.year, 1, 1, tzinfo=timezone.utc)

        count = SupabaseClient.count_projects_created_since(year_start)
        return format_reference_code(settings.REFERENCE_CODE_PREFIX, now.year, count + 1)

    @staticmethod
    def create_project(submission: ProjectSubmission) -> dict[str, Any]:
        """
        Create a project from a client submission.

        Issues the reference code and tracking token, inserts the project
        as `submitted`, records the first history entry and queues the
        submission confirmation email.

        Returns:
            Dict with project_id, reference_code, tracking_token

        Raises:
            SupabaseClientError: If the insert fails
        """
        reference_code = ProjectService.issue_reference_code()
        tracking_token = generate_tracking_token()

        requirements = {"expected_outputs": submission.expected_outputs, **(submission.requirements or {})}

        project = SupabaseClient.insert_project({
            "reference_code": reference_code,
            "tracking_token": tracking_token,
            "package_id": submission.package_id,
            "agreed_price": submission.agreed_price,
            "status": ProjectStatus.SUBMITTED.value,
            "topic": submission.topic,
            "deadline": submission.deadline.isoformat(),
            "requirements": json.dumps(requirements),
            "special_instructions": submission.special_instructions,
            "client_name": submission.client_name,
            "client_email": submission.client_email,
            "client_phone": submission.client_phone,
        })
        project_id = str(project["id"])
        logger.info(f"Created project {project_id} ({reference_code})")

        try:
            SupabaseClient.insert_history_entry(
                project_id,
                action="submitted",
                new_status=ProjectStatus.SUBMITTED.value,
                notes="Project submitted by client",
            )
        except Exception as e:
            # Intake stands even without its first history row
            logger.error(f"Failed to record submission history for {project_id}: {e}")

        NotificationService.notify_quietly(
            project_id,
            NotificationKind.SUBMISSION_CONFIRMATION,
            {
                "deadline": submission.deadline.isoformat(),
                "agreed_price": submission.agreed_price,
            },
        )

        return {
            "project_id": project_id,
            "reference_code": reference_code,
            "tracking_token": tracking_token,
        }

    @staticmethod
    def update_status(
        project_id: str,
        new_status: ProjectStatus,
        performed_by: str | None = None,
        notes: str | None = None,
    ) -> dict[str, Any]:
        """
        Move a project to a new status.

        On `complete` the completion email is queued. A notification failure
        is logged and does not undo the transition.

        Raises:
            ProjectNotFoundError: If the project doesn't exist
            InvalidStatusTransitionError: If the transition isn't allowed
        """
        project = SupabaseClient.fetch_project_status(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)

        if not can_transition(project.status, new_status):
            raise InvalidStatusTransitionError(project.status, new_status.value)

        SupabaseClient.update_project_status(project.id, new_status.value)
        SupabaseClient.insert_history_entry(
            project.id,
            action="completed" if new_status == ProjectStatus.COMPLETE else "status_change",
            old_status=project.status,
            new_status=new_status.value,
            notes=notes,
            performed_by=performed_by,
        )
        logger.info(f"Project {project.id}: {project.status} -> {new_status.value}")

        notification = None
        if new_status == ProjectStatus.COMPLETE:
            notification = NotificationService.notify_quietly(project.id, NotificationKind.COMPLETION)

        return {
            "project_id": project.id,
            "old_status": project.status,
            "status": new_status.value,
            "notification_task_id": notification.task_id if notification else None,
        }

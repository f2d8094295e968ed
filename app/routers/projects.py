# =============================================================================
# app/routers/projects.py - Project Intake and Status Endpoints
# =============================================================================
# - POST /projects: public intake form submission (no auth)
# - PATCH /projects/{id}/status: staff-only status transitions
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request
from pydantic import BaseModel, Field, ValidationError

from app.auth import StaffUser, get_current_staff
from app.exceptions import InvalidRequestError, MissingFieldError
from core.models.project import ProjectStatus, ProjectSubmission
from core.services.project_service import ProjectService

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Request/Response Models
# =============================================================================

class ProjectCreateResponse(BaseModel):
    success: bool = True
    project_id: str
    reference_code: str = Field(..., example="SA-2026-00042")
    tracking_token: str


class StatusUpdateRequest(BaseModel):
    status: ProjectStatus
    notes: str | None = Field(default=None, max_length=2000)


class StatusUpdateResponse(BaseModel):
    project_id: str
    old_status: str
    status: str
    notification_task_id: str | None = None


def _submission_error(exc: ValidationError) -> InvalidRequestError:
    """Report the first intake validation problem in plain words."""
    error = exc.errors()[0]
    field = error["loc"][0] if error.get("loc") else None

    if error["type"] == "missing":
        return MissingFieldError(f"Missing required field: {field}", fields=[str(field)])

    message = error.get("msg", "Invalid request")
    # Pydantic prefixes custom validator messages
    message = message.removeprefix("Value error, ")
    return InvalidRequestError(message, code="INVALID_SUBMISSION", details={"field": field})


# =============================================================================
# Endpoints
# =============================================================================

@router.post("", response_model=ProjectCreateResponse, status_code=201)
async def create_project(request: Request):
    """
    Submit a new project.

    Validates the form, issues a reference code (SA-YYYY-NNNNN) and a
    tracking token, and emails the client a confirmation with their
    tracking link.
    """
    try:
        payload = await request.json()
    except ValueError:
        raise InvalidRequestError("Missing form data", code="MISSING_FORM_DATA")

    if not isinstance(payload, dict):
        raise InvalidRequestError("Missing form data", code="MISSING_FORM_DATA")

    try:
        submission = ProjectSubmission.model_validate(payload)
    except ValidationError as e:
        raise _submission_error(e)

    result = ProjectService.create_project(submission)
    return ProjectCreateResponse(success=True, **result)


@router.patch("/{project_id}/status", response_model=StatusUpdateResponse)
async def update_project_status(
    project_id: Annotated[str, Path(description="Project UUID")],
    body: StatusUpdateRequest,
    staff: StaffUser = Depends(get_current_staff),
):
    """
    Move a project to a new status (admins and writers).

    Completing a project queues the completion email. An email failure is
    logged and does not undo the status change.
    """
    logger.info(f"{staff.role.value} {staff.id} requested {project_id} -> {body.status.value}")
    result = ProjectService.update_status(
        project_id,
        body.status,
        performed_by=str(staff.id),
        notes=body.notes,
    )
    return StatusUpdateResponse(**result)

# =============================================================================
# app/routers/tasks.py - Task Status Endpoints
# =============================================================================
# Lets the dashboard check whether a queued notification email was sent.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Path, HTTPException
from pydantic import BaseModel

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class TaskStatusResponse(BaseModel):
    """Response model for task status."""
    task_id: str
    status: str
    message: str | None = None
    result: dict | None = None
    error: str | None = None


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/{task_id}", response_model=TaskStatusResponse)
async def get_task_status(
    task_id: Annotated[str, Path(description="Celery task ID")]
):
    """
    Get the status of a notification task.

    Returns the current state of the task:
    - PENDING: Task is waiting in queue (or the ID is unknown)
    - STARTED: Task has been picked up by a worker
    - SUCCESS: Task finished; `result.success` says whether the email went out
    - FAILURE: Task raised; `error` holds the message
    """
    try:
        from workers.celery_app import celery_app

        result = celery_app.AsyncResult(task_id)

        response = TaskStatusResponse(
            task_id=task_id,
            status=result.status,
        )

        if result.status == "SUCCESS":
            response.result = result.result
            response.message = "Complete"

        elif result.status == "FAILURE":
            response.error = str(result.result) if result.result else "Unknown error"
            response.message = "Failed"

        elif result.status == "PENDING":
            response.message = "Waiting in queue..."

        elif result.status == "STARTED":
            response.message = "Sending..."

        return response

    except Exception as e:
        logger.error(f"Error getting task status: {e}")
        raise HTTPException(status_code=500, detail="Failed to get task status")

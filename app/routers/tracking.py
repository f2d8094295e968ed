# =============================================================================
# app/routers/tracking.py - Client Tracking Endpoints
# =============================================================================
# Public endpoints used from the client tracking page. There is no login:
# the tracking token identifies the project and a 4-digit PIN (last digits
# of the client's phone) unlocks the timeline and deliverables.
#
# A successful PIN check sets the `track_verified_<projectId>` cookie, which
# the file endpoints require.
# =============================================================================

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Path, Request, Response
from pydantic import BaseModel, Field

from app.config import settings
from app.exceptions import DependencyError, StartpointException, route_failure
from core.models.files import DeliverableFile
from core.services.storage_service import StorageError
from core.services.tracking_service import TrackingService
from lib.verification import verification_cookie_name

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Request/Response Models
# =============================================================================

class VerifyPinRequest(BaseModel):
    """
    PIN check payload.

    Fields are loosely typed so that absent, empty and malformed values all
    reach the service, which reports them as 400 with a specific message.
    """
    projectId: Any = Field(default=None, example="550e8400-e29b-41d4-a716-446655440000")
    pin: Any = Field(default=None, example="4567")
    token: Any = Field(default=None, example="abc123")


class VerifyPinResponse(BaseModel):
    success: bool = True


class DownloadLinkResponse(BaseModel):
    url: str
    fileName: str


def _as_text(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return str(value)


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/verify", response_model=VerifyPinResponse)
async def verify_pin(body: VerifyPinRequest, response: Response):
    """
    Verify a client's PIN for a project.

    On success sets an httpOnly verification cookie scoped to the project,
    valid for one hour. A wrong PIN changes nothing server-side.
    """
    project_id = _as_text(body.projectId)
    try:
        marker = TrackingService.verify_pin(
            project_id=project_id,
            token=_as_text(body.token),
            pin=body.pin,
        )
    except DependencyError as e:
        raise route_failure(e, "Verification failed")
    except StartpointException:
        raise
    except Exception as e:
        raise route_failure(e, "Verification failed")

    response.set_cookie(
        key=verification_cookie_name(project_id),
        value=marker,
        max_age=settings.TRACKING_VERIFICATION_TTL_SECONDS,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )
    return VerifyPinResponse(success=True)


@router.get("/{token}")
async def get_tracking_summary(
    token: Annotated[str, Path(description="Project tracking token")],
    request: Request,
):
    """
    Get the public tracking view of a project.

    Includes reference code, status and deadline. The status timeline is
    only included once the PIN has been verified.
    """
    try:
        return TrackingService.get_summary(token, request.cookies)
    except DependencyError as e:
        raise route_failure(e, "Failed to fetch project")
    except StartpointException:
        raise
    except Exception as e:
        raise route_failure(e, "Failed to fetch project")


@router.get("/{token}/files", response_model=list[DeliverableFile])
async def list_files(
    token: Annotated[str, Path(description="Project tracking token")],
    request: Request,
):
    """
    List deliverable files for a completed project, newest first.

    Requires the project to be complete (or paid) and a valid verification
    cookie, checked in that order.
    """
    try:
        return TrackingService.list_files(token, request.cookies)
    except DependencyError as e:
        raise route_failure(e, "Failed to fetch files")
    except StartpointException:
        raise
    except Exception as e:
        raise route_failure(e, "Failed to fetch files")


@router.get("/{token}/files/{file_id}", response_model=DownloadLinkResponse)
async def download_file(
    token: Annotated[str, Path(description="Project tracking token")],
    file_id: Annotated[str, Path(description="Project file ID")],
    request: Request,
):
    """
    Get a signed download URL for one deliverable.

    The URL expires after an hour and suggests the original file name.
    """
    try:
        link = TrackingService.download_file(token, file_id, request.cookies)
    except StorageError:
        raise
    except DependencyError as e:
        raise route_failure(e, "Failed to download file")
    except StartpointException:
        raise
    except Exception as e:
        raise route_failure(e, "Failed to download file")

    return DownloadLinkResponse(url=link.url, fileName=link.file_name)

# =============================================================================
# core/services/tracking_service.py - Client Project Tracking
# =============================================================================
# The PIN-gated tracking flow used by clients who have no account:
#
#   verify_pin     id + token + PIN      -> signed verification marker
#   get_summary    token (+ marker)      -> public status, timeline if verified
#   list_files     token + marker        -> deliverables, newest first
#   download_file  token + marker + file -> signed URL
#
# File access checks run strictly in order and the first failure wins:
#   1. project exists for token          (404)
#   2. project status is complete/paid   (403)
#   3. verification marker is valid     (401)
#   4. file belongs to the project       (404, download only)
#
# The service writes nothing to the project; verification state lives only
# in the client's cookie.
# =============================================================================

import logging
from collections.abc import Mapping
from typing import Any

from app.exceptions import (
    DeliverableNotFoundError,
    FilesNotAvailableError,
    InvalidPinError,
    MalformedPinError,
    MissingFieldError,
    ProjectNotFoundError,
    VerificationRequiredError,
)
from core.models.files import DeliverableFile, DownloadLink
from core.models.project import TrackedProject, is_completed_status
from core.services.storage_service import StorageService
from lib.supabase_client import SupabaseClient
from lib.verification import (
    is_verified,
    is_well_formed_pin,
    mint_verification_token,
    pin_matches,
    verification_cookie_name,
)

logger = logging.getLogger(__name__)


class TrackingService:
    """
    Service for the client tracking gate.

    `cookies` arguments are the request's cookie mapping; the service looks
    up the project-specific verification cookie itself.
    """

    # -------------------------------------------------------------------------
    # PIN Verification
    # -------------------------------------------------------------------------

    @staticmethod
    def verify_pin(
        project_id: str | None,
        token: str | None,
        pin: str | None,
    ) -> str:
        """
        Check a client's PIN and mint a verification marker.

        Args:
            project_id: Project UUID
            token: Tracking token for the same project
            pin: Four-digit PIN (last 4 digits of the phone on file)

        Returns:
            Signed marker to store in the verification cookie

        Raises:
            MissingFieldError: If any field is absent or empty
            MalformedPinError: If pin is not exactly 4 digits
            ProjectNotFoundError: If id and token don't resolve to one project
            InvalidPinError: If the PIN doesn't match
        """
        missing = [
            name for name, value in (("projectId", project_id), ("pin", pin), ("token", token))
            if not value
        ]
        if missing:
            raise MissingFieldError(fields=missing)

        if not is_well_formed_pin(pin):
            raise MalformedPinError()

        project = SupabaseClient.fetch_project_for_verification(project_id, token)
        if project is None:
            raise ProjectNotFoundError(project_id)

        if not pin_matches(pin, project.client_phone):
            logger.info(f"Incorrect PIN for project {project.id}")
            raise InvalidPinError(project.id)

        logger.info(f"PIN verified for project {project.id}")
        return mint_verification_token(project.id)

    @staticmethod
    def is_request_verified(project_id: str, cookies: Mapping[str, str]) -> bool:
        """True when the request carries a valid marker for `project_id`."""
        return is_verified(cookies.get(verification_cookie_name(project_id)), project_id)

    # -------------------------------------------------------------------------
    # Summary
    # -------------------------------------------------------------------------

    @staticmethod
    def get_summary(token: str, cookies: Mapping[str, str]) -> dict[str, Any]:
        """
        Public tracking view of a project.

        Contact details are never included. The history timeline is only
        included once the PIN has been verified.

        Raises:
            ProjectNotFoundError: If no project has this token
        """
        project = SupabaseClient.fetch_project_summary(token)
        if project is None:
            raise ProjectNotFoundError(token)

        verified = TrackingService.is_request_verified(project.id, cookies)

        summary: dict[str, Any] = {
            "id": project.id,
            "reference_code": project.reference_code,
            "status": project.status,
            "status_label": project.status_label,
            "topic": project.topic,
            "deadline": project.deadline,
            "estimated_completion_at": project.estimated_completion_at,
            "created_at": project.created_at,
            "is_verified": verified,
            "files_available": is_completed_status(project.status),
        }

        if verified:
            summary["timeline"] = [
                entry.model_dump() for entry in SupabaseClient.fetch_project_history(project.id)
            ]

        return summary

    # -------------------------------------------------------------------------
    # File Access
    # -------------------------------------------------------------------------

    @staticmethod
    def _authorize_file_access(token: str, cookies: Mapping[str, str]) -> TrackedProject:
        """Run checks 1-3 of the file access chain."""
        project = SupabaseClient.fetch_project_by_token(token)
        if project is None:
            raise ProjectNotFoundError(token)

        if not is_completed_status(project.status):
            raise FilesNotAvailableError(project.id, project.status)

        if not TrackingService.is_request_verified(project.id, cookies):
            raise VerificationRequiredError(project.id)

        return project

    @staticmethod
    def list_files(token: str, cookies: Mapping[str, str]) -> list[DeliverableFile]:
        """
        List a completed project's deliverables, newest first.

        Raises:
            ProjectNotFoundError, FilesNotAvailableError, VerificationRequiredError
        """
        project = TrackingService._authorize_file_access(token, cookies)
        return SupabaseClient.list_deliverable_files(project.id)

    @staticmethod
    def download_file(token: str, file_id: str, cookies: Mapping[str, str]) -> DownloadLink:
        """
        Mint a signed download URL for one of the project's files.

        Raises:
            ProjectNotFoundError, FilesNotAvailableError, VerificationRequiredError,
            DeliverableNotFoundError, StorageError
        """
        project = TrackingService._authorize_file_access(token, cookies)

        file = SupabaseClient.fetch_project_file(file_id, project.id)
        if file is None:
            raise DeliverableNotFoundError(file_id)

        url = StorageService.create_signed_download_url(
            file.storage_path,
            download_name=file.file_name,
        )

        logger.info(f"Issued download link for file {file.id} of project {project.id}")
        return DownloadLink(url=url, file_name=file.file_name)

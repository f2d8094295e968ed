# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides specialized methods for fetching:
# - Projects by tracking token, by id + token, and contact details
# - Deliverable files for a project
# - Project history (timeline)
# - Staff profiles for role checks
#
# Every row is validated into a Pydantic model before it leaves this module.
# A row that doesn't fit the model raises SupabaseClientError (a
# DependencyError), so callers never see half-shaped dicts.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   project = SupabaseClient.fetch_project_by_token(token)
# =============================================================================

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError
from supabase import create_client, Client

from app.config import settings
from app.exceptions import DependencyError
from core.models.files import DeliverableFile, ProjectFileRef
from core.models.project import (
    ProjectContact,
    ProjectHistoryEntry,
    ProjectSummary,
    TrackedProject,
)

# Set up logging for this module
logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# PostgREST code returned by .single() when no row matches
NO_ROWS_CODE = "PGRST116"
# Postgres code for a filter value that isn't valid for the column type
# (e.g. a non-UUID id). Such a lookup can only ever miss.
INVALID_TEXT_CODE = "22P02"

PROJECT_TRACKING_COLUMNS = "id, status, tracking_token, client_phone"
PROJECT_CONTACT_COLUMNS = "id, client_email, client_name, reference_code, tracking_token, topic"
PROJECT_SUMMARY_COLUMNS = "id, reference_code, status, topic, deadline, estimated_completion_at, created_at"
DELIVERABLE_COLUMNS = "id, file_name, file_size, file_type, storage_path, created_at"
FILE_REF_COLUMNS = "id, project_id, file_name, storage_path, is_deliverable"
HISTORY_COLUMNS = "id, action, old_status, new_status, notes, created_at"


class SupabaseClientError(DependencyError):
    """
    Error during Supabase operations.

    Carries the internal message and query context for logs; the client only
    ever sees the generic public message.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, details=details)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        project = SupabaseClient.fetch_project_by_token("abc123")
        if project and project.status == "complete":
            files = SupabaseClient.list_deliverable_files(project.id)
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        Tracking lookups are anonymous, so the service key plus explicit
        filters is what scopes every query.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                )
        return cls._instance

    @staticmethod
    def _is_no_rows(error: Exception) -> bool:
        return NO_ROWS_CODE in str(error)

    @staticmethod
    def _is_unmatchable(error: Exception) -> bool:
        message = str(error)
        return NO_ROWS_CODE in message or INVALID_TEXT_CODE in message

    @staticmethod
    def _validate(model: type[ModelT], row: dict[str, Any], table: str) -> ModelT:
        """Decode one row, turning schema drift into a DependencyError."""
        try:
            return model.model_validate(row)
        except ValidationError as e:
            raise SupabaseClientError(
                message=f"Unexpected row shape from {table}: {e.error_count()} error(s)",
                code="ROW_DECODE_FAILED",
                details={"table": table, "model": model.__name__},
            )

    @classmethod
    def _fetch_single(
        cls,
        model: type[ModelT],
        table: str,
        columns: str,
        filters: dict[str, Any],
        error_code: str,
    ) -> ModelT | None:
        """
        Fetch exactly one row matching all `filters`, or None.

        Raises:
            SupabaseClientError: If the query fails or the row doesn't decode
        """
        client = cls.get_client()

        try:
            query = client.table(table).select(columns)
            for column, value in filters.items():
                query = query.eq(column, value)
            response = query.single().execute()
        except Exception as e:
            if cls._is_unmatchable(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch from {table}: {e}",
                code=error_code,
                details={"table": table, "filters": list(filters)},
            )

        if not response.data:
            return None
        return cls._validate(model, response.data, table)

    # -------------------------------------------------------------------------
    # Projects
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_project_by_token(cls, tracking_token: str) -> TrackedProject | None:
        """
        Resolve a project from its tracking token.

        Args:
            tracking_token: The client's opaque tracking token

        Returns:
            TrackedProject or None if no project has this token

        Raises:
            SupabaseClientError: If query fails
        """
        return cls._fetch_single(
            TrackedProject,
            "projects",
            PROJECT_TRACKING_COLUMNS,
            {"tracking_token": tracking_token},
            "FETCH_PROJECT_FAILED",
        )

    @classmethod
    def fetch_project_for_verification(
        cls,
        project_id: str,
        tracking_token: str,
    ) -> TrackedProject | None:
        """
        Resolve a project by id AND tracking token.

        Both must match; a wrong id with a right token (or vice versa) is
        indistinguishable from a missing project.
        """
        return cls._fetch_single(
            TrackedProject,
            "projects",
            PROJECT_TRACKING_COLUMNS,
            {"id": project_id, "tracking_token": tracking_token},
            "FETCH_PROJECT_FAILED",
        )

    @classmethod
    def fetch_project_summary(cls, tracking_token: str) -> ProjectSummary | None:
        """Public tracking fields for a project, by tracking token."""
        return cls._fetch_single(
            ProjectSummary,
            "projects",
            PROJECT_SUMMARY_COLUMNS,
            {"tracking_token": tracking_token},
            "FETCH_PROJECT_FAILED",
        )

    @classmethod
    def fetch_project_contact(cls, project_id: str) -> ProjectContact | None:
        """Contact and reference fields used to address notifications."""
        return cls._fetch_single(
            ProjectContact,
            "projects",
            PROJECT_CONTACT_COLUMNS,
            {"id": project_id},
            "FETCH_CONTACT_FAILED",
        )

    @classmethod
    def fetch_project_status(cls, project_id: str) -> TrackedProject | None:
        """Current status of a project, by id."""
        return cls._fetch_single(
            TrackedProject,
            "projects",
            PROJECT_TRACKING_COLUMNS,
            {"id": project_id},
            "FETCH_PROJECT_FAILED",
        )

    @classmethod
    def count_projects_created_since(cls, since: datetime) -> int:
        """
        Count projects created on or after `since`.

        Used to sequence reference codes within a calendar year.
        """
        client = cls.get_client()
        since_iso = since.astimezone(timezone.utc).isoformat()

        try:
            response = (
                client.table("projects")
                .select("id", count="exact")
                .gte("created_at", since_iso)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to count projects: {e}",
                code="COUNT_PROJECTS_FAILED",
                details={"since": since_iso},
            )

        return response.count or 0

    @classmethod
    def insert_project(cls, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a project row and return it.

        Raises:
            SupabaseClientError: If insert fails or returns nothing
        """
        client = cls.get_client()

        try:
            response = client.table("projects").insert(data).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert project: {e}",
                code="INSERT_PROJECT_FAILED",
                details={"reference_code": data.get("reference_code")},
            )

        if not response.data:
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA",
            )
        return response.data[0]

    @classmethod
    def update_project_status(cls, project_id: str, status: str) -> None:
        """Set a project's status and bump updated_at / last_activity_at."""
        client = cls.get_client()
        now = datetime.now(timezone.utc).isoformat()

        try:
            (
                client.table("projects")
                .update({"status": status, "updated_at": now, "last_activity_at": now})
                .eq("id", project_id)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update project status: {e}",
                code="UPDATE_STATUS_FAILED",
                details={"project_id": project_id, "status": status},
            )

    # -------------------------------------------------------------------------
    # Files
    # -------------------------------------------------------------------------

    @classmethod
    def list_deliverable_files(cls, project_id: str) -> list[DeliverableFile]:
        """
        Fetch the client-visible files of a project, newest first.

        Only rows with is_deliverable = true are returned.
        """
        client = cls.get_client()

        try:
            response = (
                client.table("project_files")
                .select(DELIVERABLE_COLUMNS)
                .eq("project_id", project_id)
                .eq("is_deliverable", True)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list project files: {e}",
                code="LIST_FILES_FAILED",
                details={"project_id": project_id},
            )

        rows = response.data or []
        logger.debug(f"Fetched {len(rows)} deliverables for project {project_id}")
        return [cls._validate(DeliverableFile, row, "project_files") for row in rows]

    @classmethod
    def fetch_project_file(cls, file_id: str, project_id: str) -> ProjectFileRef | None:
        """Fetch one deliverable file row, only if it belongs to `project_id`."""
        return cls._fetch_single(
            ProjectFileRef,
            "project_files",
            FILE_REF_COLUMNS,
            {"id": file_id, "project_id": project_id, "is_deliverable": True},
            "FETCH_FILE_FAILED",
        )

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_project_history(cls, project_id: str) -> list[ProjectHistoryEntry]:
        """Project timeline, newest first."""
        client = cls.get_client()

        try:
            response = (
                client.table("project_history")
                .select(HISTORY_COLUMNS)
                .eq("project_id", project_id)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch project history: {e}",
                code="FETCH_HISTORY_FAILED",
                details={"project_id": project_id},
            )

        return [cls._validate(ProjectHistoryEntry, row, "project_history") for row in response.data or []]

    @classmethod
    def insert_history_entry(
        cls,
        project_id: str,
        action: str,
        old_status: str | None = None,
        new_status: str | None = None,
        notes: str | None = None,
        performed_by: str | None = None,
    ) -> None:
        """Append a row to project_history."""
        client = cls.get_client()

        data = {
            "project_id": project_id,
            "action": action,
            "old_status": old_status,
            "new_status": new_status,
            "notes": notes,
            "performed_by": performed_by,
        }

        try:
            client.table("project_history").insert(data).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert history entry: {e}",
                code="INSERT_HISTORY_FAILED",
                details={"project_id": project_id, "action": action},
            )

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_profile(cls, user_id: str) -> dict[str, Any] | None:
        """Fetch role and active flag for a staff user."""
        client = cls.get_client()

        try:
            response = (
                client.table("profiles")
                .select("id, role, is_active, full_name")
                .eq("id", user_id)
                .single()
                .execute()
            )
        except Exception as e:
            if cls._is_no_rows(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch profile: {e}",
                code="FETCH_PROFILE_FAILED",
                details={"user_id": user_id},
            )

        return response.data

# =============================================================================
# core/models/files.py - Deliverable File Schemas
# =============================================================================
# - DeliverableFile: project_files row returned by the listing endpoint
# - ProjectFileRef: minimal row needed to sign a download
# - DownloadLink: response for a single-file download
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DeliverableFile(BaseModel):
    """
    A client-visible file attached to a project.

    Example:
        {
            "id": "7c9e6679-7425-40de-944b-e07fc1f90ae7",
            "file_name": "final-paper.docx",
            "file_size": 48213,
            "file_type": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            "storage_path": "projects/abc/final-paper.docx",
            "created_at": "2026-03-01T09:30:00Z"
        }
    """
    id: str
    file_name: str
    file_size: int | None = Field(default=None, ge=0)
    file_type: str | None = None
    storage_path: str
    created_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return str(value)


class ProjectFileRef(BaseModel):
    """File row used for download: owner, display name and storage path."""
    id: str
    project_id: str
    file_name: str
    storage_path: str
    is_deliverable: bool = True

    @field_validator("id", "project_id", mode="before")
    @classmethod
    def _stringify_ids(cls, value):
        return str(value)


class DownloadLink(BaseModel):
    """Signed, time-limited download URL for one deliverable."""
    url: str
    file_name: str = Field(..., serialization_alias="fileName")

    model_config = ConfigDict(populate_by_name=True)

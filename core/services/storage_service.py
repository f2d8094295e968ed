# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Mints time-limited signed URLs for project files in Supabase Storage.
# The URL is the only credential needed to fetch the bytes; its expiry is the
# only revocation.
# =============================================================================

import logging

from lib.supabase_client import SupabaseClient
from app.config import settings
from app.exceptions import DependencyError

logger = logging.getLogger(__name__)


class StorageError(DependencyError):
    """Raised when Supabase Storage cannot produce a signed URL."""

    def __init__(self, path: str, error: str):
        super().__init__(
            f"Failed to sign storage path {path}: {error}",
            public_message="Failed to generate download link",
            code="STORAGE_SIGN_FAILED",
            details={"path": path},
        )


class StorageService:
    """
    Service for Supabase Storage operations.

    Only signed retrieval is needed by the tracking flow; uploads are done
    by the staff dashboard.
    """

    @staticmethod
    def create_signed_download_url(
        storage_path: str,
        download_name: str | None = None,
        expires_in: int | None = None,
        bucket: str | None = None,
    ) -> str:
        """
        Create a signed URL for a stored file.

        Args:
            storage_path: Path in the storage bucket
            download_name: Suggested filename for the browser download
            expires_in: Lifetime in seconds (defaults to SIGNED_URL_TTL_SECONDS)
            bucket: Bucket name (defaults to PROJECT_FILES_BUCKET)

        Returns:
            Signed URL string

        Raises:
            StorageError: If signing fails or returns no URL
        """
        client = SupabaseClient.get_client()
        bucket = bucket or settings.PROJECT_FILES_BUCKET
        expires_in = expires_in or settings.SIGNED_URL_TTL_SECONDS

        options = {"download": download_name} if download_name else {}

        try:
            result = client.storage.from_(bucket).create_signed_url(
                storage_path,
                expires_in,
                options,
            )
        except Exception as e:
            logger.error(f"Signed URL error: {e}")
            raise StorageError(storage_path, str(e))

        # storage3 has returned both spellings across versions
        url = None
        if isinstance(result, dict):
            url = result.get("signedURL") or result.get("signedUrl")

        if not url:
            raise StorageError(storage_path, "no signed URL returned")

        logger.info(f"Signed download URL for {storage_path} ({expires_in}s)")
        return url

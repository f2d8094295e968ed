# =============================================================================
# tests/test_supabase_client.py - Data Access Tests
# =============================================================================
# Tests for lib/supabase_client.py and core/services/storage_service.py with
# a mocked Supabase client. Covers:
# - Query filters (deliverables only, ownership checks)
# - "No rows" and invalid-id errors mapping to None
# - Row validation at the boundary
# - Signed URL creation
#
# Run with: pytest tests/test_supabase_client.py -v
# =============================================================================

from datetime import datetime, timezone
from unittest.mock import MagicMock, call, patch

import pytest

from core.services.storage_service import StorageError, StorageService
from lib.supabase_client import SupabaseClient, SupabaseClientError

from tests.conftest import PROJECT_ID


def make_client(data=None, count=None, error=None):
    """Mock client whose query builder methods all chain back to one query."""
    query = MagicMock()
    for method in ("select", "eq", "gte", "order", "single", "insert", "update", "limit"):
        getattr(query, method).return_value = query

    if error is not None:
        query.execute.side_effect = error
    else:
        query.execute.return_value = MagicMock(data=data, count=count)

    client = MagicMock()
    client.table.return_value = query
    return client, query


@pytest.fixture
def mock_client():
    """Patch get_client; tests configure the returned client via the setter."""
    holder = {}

    def _use(**kwargs):
        client, query = make_client(**kwargs)
        holder["client"] = client
        return client, query

    with patch.object(SupabaseClient, "get_client", side_effect=lambda: holder["client"]):
        yield _use


# =============================================================================
# Single-row Lookups
# =============================================================================

class TestProjectLookups:

    def test_fetch_by_token(self, mock_client):
        client, query = mock_client(data={
            "id": PROJECT_ID,
            "status": "complete",
            "tracking_token": "abc123",
            "client_phone": "09171234567",
        })

        project = SupabaseClient.fetch_project_by_token("abc123")

        assert project.id == PROJECT_ID
        assert project.status == "complete"
        client.table.assert_called_once_with("projects")
        query.eq.assert_called_once_with("tracking_token", "abc123")

    def test_verification_lookup_filters_on_id_and_token(self, mock_client):
        _, query = mock_client(data={"id": PROJECT_ID, "status": "review", "client_phone": "0917"})

        SupabaseClient.fetch_project_for_verification(PROJECT_ID, "abc123")

        assert query.eq.call_args_list == [call("id", PROJECT_ID), call("tracking_token", "abc123")]

    def test_no_rows_is_none(self, mock_client):
        mock_client(error=Exception("{'code': 'PGRST116', 'message': 'JSON object requested, multiple (or no) rows returned'}"))
        assert SupabaseClient.fetch_project_by_token("missing") is None

    def test_invalid_uuid_is_none(self, mock_client):
        mock_client(error=Exception("{'code': '22P02', 'message': 'invalid input syntax for type uuid'}"))
        assert SupabaseClient.fetch_project_for_verification("not-a-uuid", "abc123") is None

    def test_other_errors_raise(self, mock_client):
        mock_client(error=Exception("connection reset"))

        with pytest.raises(SupabaseClientError) as exc_info:
            SupabaseClient.fetch_project_by_token("abc123")

        assert exc_info.value.code == "FETCH_PROJECT_FAILED"
        assert exc_info.value.to_dict() == {"error": "Internal server error"}

    def test_malformed_row_raises(self, mock_client):
        mock_client(data={"id": PROJECT_ID})

        with pytest.raises(SupabaseClientError) as exc_info:
            SupabaseClient.fetch_project_by_token("abc123")

        assert exc_info.value.code == "ROW_DECODE_FAILED"

    def test_file_lookup_is_scoped_to_project(self, mock_client):
        _, query = mock_client(data={
            "id": "f1",
            "project_id": PROJECT_ID,
            "file_name": "paper.docx",
            "storage_path": "projects/p/paper.docx",
            "is_deliverable": True,
        })

        file = SupabaseClient.fetch_project_file("f1", PROJECT_ID)

        assert file.file_name == "paper.docx"
        assert file.is_deliverable is True
        assert query.eq.call_args_list == [
            call("id", "f1"),
            call("project_id", PROJECT_ID),
            call("is_deliverable", True),
        ]

    def test_internal_working_file_is_not_found(self, mock_client):
        mock_client(error=Exception("{'code': 'PGRST116', 'message': 'JSON object requested, multiple (or no) rows returned'}"))
        assert SupabaseClient.fetch_project_file("internal-notes", PROJECT_ID) is None


# =============================================================================
# Lists and Writes
# =============================================================================

class TestListsAndWrites:

    def test_deliverables_query(self, mock_client):
        client, query = mock_client(data=[
            {
                "id": "f2",
                "file_name": "final.docx",
                "file_size": 2048,
                "file_type": None,
                "storage_path": "projects/p/final.docx",
                "created_at": "2026-03-02T09:30:00+00:00",
            },
        ])

        files = SupabaseClient.list_deliverable_files(PROJECT_ID)

        assert [f.id for f in files] == ["f2"]
        client.table.assert_called_once_with("project_files")
        assert query.eq.call_args_list == [call("project_id", PROJECT_ID), call("is_deliverable", True)]
        query.order.assert_called_once_with("created_at", desc=True)

    def test_deliverables_empty(self, mock_client):
        mock_client(data=None)
        assert SupabaseClient.list_deliverable_files(PROJECT_ID) == []

    def test_count_projects(self, mock_client):
        _, query = mock_client(data=[], count=7)

        count = SupabaseClient.count_projects_created_since(datetime(2026, 1, 1, tzinfo=timezone.utc))

        assert count == 7
        query.select.assert_called_once_with("id", count="exact")
        query.gte.assert_called_once_with("created_at", "2026-01-01T00:00:00+00:00")

    def test_insert_project_returns_row(self, mock_client):
        mock_client(data=[{"id": PROJECT_ID, "reference_code": "SA-2026-00001"}])
        assert SupabaseClient.insert_project({"reference_code": "SA-2026-00001"})["id"] == PROJECT_ID

    def test_insert_project_without_data(self, mock_client):
        mock_client(data=[])

        with pytest.raises(SupabaseClientError) as exc_info:
            SupabaseClient.insert_project({"reference_code": "SA-2026-00001"})

        assert exc_info.value.code == "INSERT_NO_DATA"

    def test_update_status(self, mock_client):
        _, query = mock_client(data=[])

        SupabaseClient.update_project_status(PROJECT_ID, "complete")

        update = query.update.call_args.args[0]
        assert update["status"] == "complete"
        assert "updated_at" in update
        query.eq.assert_called_once_with("id", PROJECT_ID)

    def test_history_entry(self, mock_client):
        client, query = mock_client(data=[])

        SupabaseClient.insert_history_entry(PROJECT_ID, "completed", old_status="review", new_status="complete")

        client.table.assert_called_once_with("project_history")
        row = query.insert.call_args.args[0]
        assert row["action"] == "completed"
        assert row["performed_by"] is None

    def test_fetch_profile_missing(self, mock_client):
        mock_client(error=Exception("PGRST116"))
        assert SupabaseClient.fetch_profile("u1") is None


# =============================================================================
# Storage
# =============================================================================

class TestStorageService:

    @pytest.fixture
    def storage_client(self):
        client = MagicMock()
        with patch.object(SupabaseClient, "get_client", return_value=client):
            yield client

    def test_signed_url_with_download_name(self, storage_client):
        bucket = storage_client.storage.from_.return_value
        bucket.create_signed_url.return_value = {"signedURL": "https://signed/url"}

        url = StorageService.create_signed_download_url("projects/p/final.docx", download_name="final.docx")

        assert url == "https://signed/url"
        storage_client.storage.from_.assert_called_once_with("project-files")
        bucket.create_signed_url.assert_called_once_with(
            "projects/p/final.docx", 3600, {"download": "final.docx"}
        )

    def test_signed_url_alternate_key(self, storage_client):
        storage_client.storage.from_.return_value.create_signed_url.return_value = {"signedUrl": "https://u"}
        assert StorageService.create_signed_download_url("x") == "https://u"

    def test_signing_error(self, storage_client):
        storage_client.storage.from_.return_value.create_signed_url.side_effect = Exception("Object not found")

        with pytest.raises(StorageError) as exc_info:
            StorageService.create_signed_download_url("x")

        assert exc_info.value.to_dict() == {"error": "Failed to generate download link"}

    def test_missing_url(self, storage_client):
        storage_client.storage.from_.return_value.create_signed_url.return_value = {}

        with pytest.raises(StorageError):
            StorageService.create_signed_download_url("x")

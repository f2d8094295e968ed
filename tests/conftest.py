# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides project/file rows shaped like Supabase responses
# - Provides a TestClient for end-to-end route tests
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-supabase-jwt-secret")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-tracking-markers")
os.environ.setdefault("APP_URL", "https://startpoint.test")
os.environ.setdefault("RESEND_API_KEY", "")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from datetime import datetime, timezone

import pytest

from core.models.files import DeliverableFile, ProjectFileRef
from core.models.project import ProjectContact, TrackedProject


PROJECT_ID = "550e8400-e29b-41d4-a716-446655440000"
OTHER_PROJECT_ID = "6fa459ea-ee8a-3ca4-894e-db77e160355e"
TRACKING_TOKEN = "abc123"


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def project_id():
    return PROJECT_ID


@pytest.fixture
def tracking_token():
    return TRACKING_TOKEN


@pytest.fixture
def make_project():
    """Build a TrackedProject with the test id/token and a given status."""
    def _make(status: str = "in_progress", phone: str = "09171234567") -> TrackedProject:
        return TrackedProject(
            id=PROJECT_ID,
            status=status,
            tracking_token=TRACKING_TOKEN,
            client_phone=phone,
        )
    return _make


@pytest.fixture
def sample_contact():
    """Contact fields used to address notifications."""
    return ProjectContact(
        id=PROJECT_ID,
        client_email="dave@example.com",
        client_name="Dave Smith",
        reference_code="SA-2026-00042",
        tracking_token=TRACKING_TOKEN,
        topic="Climate policy in Southeast Asia",
    )


@pytest.fixture
def sample_files():
    """Two deliverables, newest first (as the data layer returns them)."""
    return [
        DeliverableFile(
            id="f2",
            file_name="final-paper.docx",
            file_size=48213,
            file_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            storage_path=f"projects/{PROJECT_ID}/final-paper.docx",
            created_at=datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc),
        ),
        DeliverableFile(
            id="f1",
            file_name="draft.pdf",
            file_size=10240,
            file_type="application/pdf",
            storage_path=f"projects/{PROJECT_ID}/draft.pdf",
            created_at=datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc),
        ),
    ]


@pytest.fixture
def sample_file_ref():
    return ProjectFileRef(
        id="f2",
        project_id=PROJECT_ID,
        file_name="final-paper.docx",
        storage_path=f"projects/{PROJECT_ID}/final-paper.docx",
    )


@pytest.fixture
def client():
    """FastAPI TestClient against the real app."""
    from fastapi.testclient import TestClient
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client

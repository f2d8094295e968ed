# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the core models to ensure:
# - Valid data is accepted and parsed correctly
# - Invalid data raises ValidationError
# - Status transitions follow the lifecycle table
# - Models serialize the way the API returns them
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from pydantic import ValidationError

from core.models import (
    DeliverableFile,
    DownloadLink,
    EmailMessage,
    NotificationKind,
    PaymentAction,
    ProjectStatus,
    ProjectSubmission,
    ProjectSummary,
    TrackedProject,
    can_transition,
    is_completed_status,
)


# =============================================================================
# Status Tests
# =============================================================================

class TestStatusTransitions:
    """Tests for the project lifecycle."""

    @pytest.mark.parametrize("current,requested", [
        ("submitted", "pending_payment_validation"),
        ("pending_payment_validation", "validated"),
        ("pending_payment_validation", "rejected"),
        ("rejected", "pending_payment_validation"),
        ("validated", "assigned"),
        ("assigned", "in_progress"),
        ("in_progress", "review"),
        ("review", "in_progress"),
        ("review", "complete"),
        ("complete", "paid"),
    ])
    def test_allowed(self, current, requested):
        assert can_transition(current, requested)

    @pytest.mark.parametrize("current,requested", [
        ("submitted", "complete"),
        ("in_progress", "complete"),
        ("complete", "in_progress"),
        ("paid", "complete"),
        ("cancelled", "submitted"),
    ])
    def test_not_allowed(self, current, requested):
        assert not can_transition(current, requested)

    def test_cancel_from_non_terminal(self):
        assert can_transition(ProjectStatus.IN_PROGRESS, ProjectStatus.CANCELLED)
        assert can_transition(ProjectStatus.COMPLETE, ProjectStatus.CANCELLED)

    def test_cannot_cancel_terminal(self):
        assert not can_transition(ProjectStatus.PAID, ProjectStatus.CANCELLED)
        assert not can_transition(ProjectStatus.CANCELLED, ProjectStatus.CANCELLED)

    def test_unknown_status_never_transitions(self):
        assert not can_transition("archived", "complete")
        assert not can_transition("review", "archived")

    @pytest.mark.parametrize("status,expected", [
        ("complete", True),
        ("paid", True),
        ("review", False),
        ("in_progress", False),
        ("cancelled", False),
        ("Complete", False),
        ("", False),
    ])
    def test_completed_statuses(self, status, expected):
        assert is_completed_status(status) is expected


# =============================================================================
# Row Model Tests
# =============================================================================

class TestRowModels:
    """Tests for models decoded from Supabase rows."""

    def test_uuid_ids_become_strings(self):
        project_id = uuid4()
        project = TrackedProject(id=project_id, status="complete")
        assert project.id == str(project_id)

    def test_tracked_project_requires_status(self):
        with pytest.raises(ValidationError):
            TrackedProject(id="p1")

    def test_summary_label_falls_back_to_raw_status(self):
        summary = ProjectSummary(id="p1", reference_code="SA-2026-00001", status="archived")
        assert summary.status_label == "archived"

    def test_deliverable_file_parses_timestamp(self):
        file = DeliverableFile(
            id=uuid4(),
            file_name="paper.docx",
            storage_path="projects/p1/paper.docx",
            created_at="2026-03-01T09:30:00+00:00",
        )
        assert file.created_at == datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)
        assert file.file_size is None

    def test_deliverable_file_rejects_negative_size(self):
        with pytest.raises(ValidationError):
            DeliverableFile(
                id="f1",
                file_name="paper.docx",
                file_size=-1,
                storage_path="x",
                created_at="2026-03-01T09:30:00Z",
            )

    def test_download_link_serializes_file_name_alias(self):
        link = DownloadLink(url="https://signed", file_name="paper.docx")
        assert link.model_dump(by_alias=True) == {"url": "https://signed", "fileName": "paper.docx"}


# =============================================================================
# Submission Tests
# =============================================================================

class TestProjectSubmission:
    """Tests for intake validation."""

    @pytest.fixture
    def valid_data(self):
        return {
            "topic": "Climate policy in Southeast Asia",
            "deadline": (datetime.now(timezone.utc) + timedelta(days=14)).isoformat(),
            "expected_outputs": "Research paper, 10 pages",
            "client_name": "Dave Smith",
            "client_email": "dave@example.com",
            "client_phone": "09171234567",
            "package_id": "pkg-basic",
            "agreed_price": 1500,
        }

    def test_valid_submission(self, valid_data):
        submission = ProjectSubmission(**valid_data)
        assert submission.client_phone == "09171234567"
        assert submission.deadline.tzinfo is not None

    def test_naive_deadline_is_treated_as_utc(self, valid_data):
        valid_data["deadline"] = (datetime.utcnow() + timedelta(days=3)).replace(microsecond=0).isoformat()
        submission = ProjectSubmission(**valid_data)
        assert submission.deadline.tzinfo == timezone.utc

    def test_past_deadline(self, valid_data):
        valid_data["deadline"] = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
        with pytest.raises(ValidationError, match="Deadline must be in the future"):
            ProjectSubmission(**valid_data)

    @pytest.mark.parametrize("email", ["dave", "dave@", "dave@example", "da ve@example.com"])
    def test_invalid_email(self, valid_data, email):
        valid_data["client_email"] = email
        with pytest.raises(ValidationError, match="Invalid email format"):
            ProjectSubmission(**valid_data)

    @pytest.mark.parametrize("phone", ["9171234567", "0917123456", "+639171234567", "08171234567"])
    def test_invalid_phone(self, valid_data, phone):
        valid_data["client_phone"] = phone
        with pytest.raises(ValidationError, match="Invalid Philippine mobile number"):
            ProjectSubmission(**valid_data)

    def test_missing_field(self, valid_data):
        del valid_data["topic"]
        with pytest.raises(ValidationError):
            ProjectSubmission(**valid_data)

    def test_price_must_be_positive(self, valid_data):
        valid_data["agreed_price"] = 0
        with pytest.raises(ValidationError):
            ProjectSubmission(**valid_data)


# =============================================================================
# Notification Model Tests
# =============================================================================

class TestNotificationModels:

    def test_payment_action_maps_to_kind(self):
        assert PaymentAction.VALIDATED.notification_kind == NotificationKind.PAYMENT_VALIDATED
        assert PaymentAction.REJECTED.notification_kind == NotificationKind.PAYMENT_REJECTED

    def test_email_requires_a_recipient(self):
        with pytest.raises(ValidationError):
            EmailMessage(to=[], subject="s", html="<p>h</p>", text="h")

    def test_email_round_trips_through_json(self):
        message = EmailMessage(to=["dave@example.com"], subject="s", html="<p>h</p>", text="h")
        assert EmailMessage.model_validate(message.model_dump()) == message

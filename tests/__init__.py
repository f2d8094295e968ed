# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Startpoint Academics API:
# - test_verification.py / test_codes.py: PIN, markers and identifiers
# - test_models.py: Pydantic model validation and status transitions
# - test_supabase_client.py: Data access with a mocked Supabase client
# - test_tracking_api.py: End-to-end tracking routes
# - test_notifications.py / test_email.py: Notification rendering and delivery
# - test_projects.py: Intake, staff status changes and auth
#
# Run tests with: pytest
# =============================================================================

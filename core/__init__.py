# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the business logic behind the API:
# - models/: Pydantic schemas for rows, requests and notifications
# - services/: Tracking gate, notifications, project lifecycle, storage
#
# Code in this package raises app.exceptions errors and leaves HTTP
# translation to the routers.
# =============================================================================

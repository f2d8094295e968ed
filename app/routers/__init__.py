# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - tracking.py: PIN-gated client tracking, file listing and download
# - notifications.py: Client email triggers (completion, payment)
# - projects.py: Project intake and staff status transitions
# - tasks.py: Notification task status
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import tracking
from . import notifications
from . import projects
from . import tasks

__all__ = [
    "health",
    "tracking",
    "notifications",
    "projects",
    "tasks",
]

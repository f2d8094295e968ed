# =============================================================================
# workers/ - Celery Background Task Workers
# =============================================================================
# This package contains the Celery configuration and task definitions for
# background delivery of transactional email.
#
# Components:
# - celery_app.py: Celery application configuration
# - tasks.py: Task definitions (notification email delivery)
# - config.py: Worker-specific settings
#
# Usage:
#   # Start worker
#   celery -A workers.celery_app worker -Q default,notifications --loglevel=info
#
#   # Submit task (from API)
#   from workers.tasks import send_notification_email
#   result = send_notification_email.delay(kind, project_id, message)
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = [
    "celery_app",
    "tasks",
]

# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .storage_service import StorageService, StorageError
from .notification_service import NotificationService
from .tracking_service import TrackingService
from .project_service import ProjectService

__all__ = [
    "StorageService",
    "StorageError",
    "NotificationService",
    "TrackingService",
    "ProjectService",
]

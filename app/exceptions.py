# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
#
# Every error reaches the client as {"error": "<message>"}. Internal details
# (query text, upstream responses) are logged server-side and never returned.
#
# Categories:
# - InvalidRequestError (400): malformed or missing input
# - AuthError (401): missing/invalid PIN or verification marker
# - ForbiddenError (403): identity is fine but a precondition is not met
# - NotFoundError (404): unresolvable project, token or file
# - DependencyError (500): data store, storage or email failure
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class StartpointException(Exception):
    """
    Base exception for the Startpoint API.

    All custom exceptions inherit from this class. `message` is what the
    client sees; `details` are kept for logging only.
    """

    def __init__(
        self,
        message: str,
        code: str = "STARTPOINT_ERROR",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        return {"error": self.message}


# =============================================================================
# Error Categories
# =============================================================================

class InvalidRequestError(StartpointException):
    """Malformed or missing input."""

    def __init__(self, message: str, code: str = "INVALID_REQUEST", details: dict[str, Any] | None = None):
        super().__init__(message, code=code, status_code=400, details=details)


class AuthError(StartpointException):
    """Caller has not proven who they are (or what PIN they know)."""

    def __init__(self, message: str, code: str = "UNAUTHORIZED", details: dict[str, Any] | None = None):
        super().__init__(message, code=code, status_code=401, details=details)


class ForbiddenError(StartpointException):
    """Caller is known but the resource is not available to them yet."""

    def __init__(self, message: str, code: str = "FORBIDDEN", details: dict[str, Any] | None = None):
        super().__init__(message, code=code, status_code=403, details=details)


class NotFoundError(StartpointException):
    """Project, token or file could not be resolved."""

    def __init__(self, message: str, code: str = "NOT_FOUND", details: dict[str, Any] | None = None):
        super().__init__(message, code=code, status_code=404, details=details)


class DependencyError(StartpointException):
    """
    A downstream service (database, storage, email) failed.

    `message` holds the internal description for logs; `public_message`
    is the only text returned to the client.
    """

    def __init__(
        self,
        message: str,
        public_message: str = "Internal server error",
        code: str = "DEPENDENCY_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, status_code=500, details=details)
        self.public_message = public_message

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.public_message}


# =============================================================================
# Tracking Exceptions
# =============================================================================

class MissingFieldError(InvalidRequestError):
    """Raised when a required request field is absent or empty."""

    def __init__(self, message: str = "Missing required fields", fields: list[str] | None = None):
        super().__init__(message, code="MISSING_FIELD", details={"fields": fields or []})


class MalformedPinError(InvalidRequestError):
    """Raised when the PIN is not exactly four ASCII digits."""

    def __init__(self):
        super().__init__("Invalid PIN format", code="MALFORMED_PIN")


class InvalidPinError(AuthError):
    """Raised when the PIN does not match the project's phone number."""

    def __init__(self, project_id: str):
        super().__init__(
            "Incorrect PIN. Please try again.",
            code="INVALID_PIN",
            details={"project_id": project_id},
        )


class VerificationRequiredError(AuthError):
    """Raised when no valid verification marker exists for the project."""

    def __init__(self, project_id: str):
        super().__init__(
            "PIN verification required",
            code="VERIFICATION_REQUIRED",
            details={"project_id": project_id},
        )


class FilesNotAvailableError(ForbiddenError):
    """Raised when files are requested before the project is completed."""

    def __init__(self, project_id: str, status: str):
        super().__init__(
            "Files are only available after project completion",
            code="FILES_NOT_AVAILABLE",
            details={"project_id": project_id, "status": status},
        )


class ProjectNotFoundError(NotFoundError):
    """Raised when a project id / tracking token does not resolve."""

    def __init__(self, reference: str = ""):
        super().__init__("Project not found", code="PROJECT_NOT_FOUND", details={"reference": reference})


class DeliverableNotFoundError(NotFoundError):
    """Raised when a file id does not belong to the tracked project."""

    def __init__(self, file_id: str):
        super().__init__("File not found", code="FILE_NOT_FOUND", details={"file_id": file_id})


# =============================================================================
# Project / Notification Exceptions
# =============================================================================

class InvalidStatusTransitionError(InvalidRequestError):
    """Raised when a status change is not allowed from the current status."""

    def __init__(self, current: str, requested: str):
        super().__init__(
            f"Cannot change status from {current} to {requested}",
            code="INVALID_STATUS_TRANSITION",
            details={"current": current, "requested": requested},
        )


class NotificationFailedError(DependencyError):
    """Raised when a notification could not be handed off or sent."""

    def __init__(self, error: str, project_id: str | None = None):
        super().__init__(
            f"Notification dispatch failed: {error}",
            public_message="Failed to send notification",
            code="NOTIFICATION_FAILED",
            details={"project_id": project_id},
        )


# =============================================================================
# Route Helpers
# =============================================================================

def route_failure(exc: Exception, public_message: str) -> DependencyError:
    """
    Wrap a data-layer or unexpected error with a route-specific message.

    Usage:
        except DependencyError as e:
            raise route_failure(e, "Failed to fetch files")
    """
    logger.error(f"{public_message}: {exc}")
    code = exc.code if isinstance(exc, StartpointException) else "INTERNAL_ERROR"
    return DependencyError(str(exc), public_message=public_message, code=code)


# =============================================================================
# Exception Handlers
# =============================================================================

async def startpoint_exception_handler(
    request: Request,
    exc: StartpointException
) -> JSONResponse:
    """
    Convert StartpointException to JSON response.

    Dependency failures are logged with their internal message and context;
    client errors are logged at debug level.
    """
    if isinstance(exc, DependencyError):
        logger.error(
            f"{exc.code} on {request.method} {request.url.path}: {exc.message} {exc.details or ''}"
        )
    else:
        logger.debug(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle request validation errors.

    Body and path validation failures are reported as 400, not FastAPI's 422.
    """
    logger.debug(f"Request validation failed on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request"}
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """Render HTTPException (auth dependencies, unknown routes) as {"error": ...}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )

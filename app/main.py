# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Startpoint Academics API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.exceptions import (
    StartpointException,
    http_exception_handler,
    startpoint_exception_handler,
    validation_exception_handler,
)
from app.routers import health, tracking, notifications, projects, tasks
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs startup configuration; there are no background tasks to manage
    in the API process (email delivery runs in Celery workers).
    """
    logger.info(f"Starting Startpoint Academics API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if settings.NOTIFICATIONS_INLINE:
        logger.info("Notifications are sent inline (no Celery handoff)")

    yield

    logger.info("Shutting down Startpoint Academics API")


# Create FastAPI application
app = FastAPI(
    title="Startpoint Academics API",
    description="""
## Project Tracking API

Clients track their academic writing projects without an account, using
the tracking link from their confirmation email and a 4-digit PIN (the last
four digits of the phone number they submitted).

### How It Works

1. **Submit** - `POST /api/v1/projects` issues a reference code and tracking link
2. **Track** - `GET /api/v1/track/{token}` shows the current status
3. **Verify** - `POST /api/v1/track/verify` checks the PIN and sets a 1-hour cookie
4. **Download** - once complete, list files and get signed download links

### Quick Start

```bash
# Verify PIN (stores the cookie in cookies.txt)
curl -c cookies.txt -X POST http://localhost:8000/api/v1/track/verify \\
  -H "Content-Type: application/json" \\
  -d '{"projectId": "<id>", "token": "<token>", "pin": "4567"}'

# List deliverables
curl -b cookies.txt http://localhost:8000/api/v1/track/<token>/files
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Staff identity and role lookup",
        },
        {
            "name": "Tracking",
            "description": "PIN-gated client tracking and file downloads",
        },
        {
            "name": "Notifications",
            "description": "Client email triggers for project events",
        },
        {
            "name": "Projects",
            "description": "Project intake and staff status changes",
        },
        {
            "name": "Tasks",
            "description": "Track queued notification emails",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - credentialed requests need explicit origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(StartpointException)
async def handle_startpoint_exception(request: Request, exc: StartpointException):
    """Handle custom Startpoint exceptions."""
    return await startpoint_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Handle request body/path validation failures."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    """Handle HTTPException raised by dependencies and routing."""
    return await http_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"}
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Client tracking endpoints
app.include_router(
    tracking.router,
    prefix="/api/v1/track",
    tags=["Tracking"]
)

# Notification trigger endpoints
app.include_router(
    notifications.router,
    prefix="/api/v1/notifications",
    tags=["Notifications"]
)

# Project intake and status endpoints
app.include_router(
    projects.router,
    prefix="/api/v1/projects",
    tags=["Projects"]
)

# Task status endpoints
app.include_router(
    tasks.router,
    prefix="/api/v1/tasks",
    tags=["Tasks"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Startpoint Academics API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }

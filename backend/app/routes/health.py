"""
Bilarn Blog Backend — Welcome & Health Check Routes
=====================================================

What:  GET / returns the plain-text welcome banner; GET /health reports
       service and database status for monitoring and container probes.
How:   The health check runs a lightweight SELECT 1 through the app's
       Database handle.

Status levels:
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 200 body, status flagged)
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from app import __version__
from app.database import Database
from app.schemas.blog import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

WELCOME_MESSAGE = "Welcome to the Bilarn Blog App API!"

# Initialized once when the module loads
_start_time = time.time()


@router.get("/", response_class=PlainTextResponse, summary="Welcome message")
async def welcome() -> str:
    return WELCOME_MESSAGE


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    database: Database = request.app.state.database

    if await database.ping():
        db_status, overall = "connected", "healthy"
    else:
        db_status, overall = "disconnected", "unhealthy"
        logger.warning("Health check: database unreachable")

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )

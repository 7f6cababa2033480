"""
Bilarn Blog Backend — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() builds the owned resources (database
       handle, blob store, blog service), attaches them to app.state, and
       registers middleware, exception handlers and routes.
Who:   uvicorn (`uvicorn app.main:app` or `python -m app`) and the tests,
       which call create_app() with their own Settings.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────┐ ┌────────┐   │
    │  │  Req ID  │→│  Logging    │→│ GZip │→│  CORS  │   │
    │  └──────────┘ └─────────────┘ └──────┘ └────────┘   │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────────┐ ┌─────────────┐  │
    │  │ /blogs CRUD  │ │ GET /uploads │ │ / & /health │  │
    │  └──────────────┘ └──────────────┘ └─────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ Storage/DB→500│   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Ensure database tables (when DB_CREATE_TABLES is set)
    3. Log startup complete

    Shutdown:
    1. Dispose the database engine (close all connections)
    2. Log shutdown complete
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import Settings, settings as default_settings
from app.database import Database
from app.exceptions import (
    BlogApiError,
    DatabaseError,
    FileStorageError,
    NotFoundError,
    ValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import blogs, health, uploads
from app.services.blob_store import BlobStore
from app.services.blog_service import BlogService
from app.services.blog_store import BlogStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str) -> None:
    """
    Configure the root logger once for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("MARKDOWN").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open owned resources on startup, release them on shutdown.

    The Database handle is created by create_app(); here it is prepared
    (tables ensured) and finally disposed. uvicorn runs the shutdown half on
    SIGINT/SIGTERM.
    """
    config: Settings = app.state.settings
    database: Database = app.state.database

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config.log_level)
    logger.info("=" * 60)
    logger.info("Bilarn Blog Backend starting up...")

    if config.db_create_tables:
        await database.create_tables()

    logger.info("Upload directory: %s", app.state.blob_store.storage_root)
    logger.info("Server ready at http://%s:%d", config.host, config.port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Bilarn Blog Backend shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(status_code: int, message: str, details: Optional[dict] = None) -> JSONResponse:
    content = {"error": message, "request_id": request_id_var.get("")}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the exception hierarchy to HTTP responses.

    Handler table:
        ValidationError         → 400 (message + details)
        RequestValidationError  → 400 (malformed multipart/path input)
        NotFoundError           → 404
        FileStorageError        → 500
        DatabaseError           → 500 (generic message, details logged only)
        BlogApiError (base)     → 500
        Exception (fallback)    → 500, converted by RequestIDMiddleware so the
                                  body and header carry the request ID

    Stack traces, SQL and file paths are logged, never returned.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return error_response(400, exc.message, exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ())[1:]) or None
        message = f"Invalid value for {field}" if field else "Invalid request"
        logger.warning("[%s] Request validation error: %s", request_id_var.get(""), errors)
        return error_response(400, message, {"field": field} if field else None)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return error_response(404, exc.message)

    @app.exception_handler(FileStorageError)
    async def handle_file_storage_error(request: Request, exc: FileStorageError):
        logger.error(
            "[%s] File storage error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return error_response(500, exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return error_response(500, exc.message)

    @app.exception_handler(BlogApiError)
    async def handle_blog_api_error(request: Request, exc: BlogApiError):
        logger.error("[%s] Application error: %s", request_id_var.get(""), exc.message)
        return error_response(500, exc.message)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    config: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Settings to use; defaults to the environment-loaded singleton.
        database: Pre-built Database handle (tests pass one bound to SQLite);
                  built from config when omitted.

    Returns:
        Fully configured FastAPI instance.
    """
    config = config or default_settings

    app = FastAPI(
        title="Bilarn Blog API",
        description=(
            "Create, list, fetch, update and delete blog posts with Markdown "
            "content and optional image uploads."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Owned Resources ───────────────────────────────────────────────────
    blob_store = BlobStore(config.storage_root, max_file_size=config.max_file_size)
    app.state.settings = config
    app.state.database = database or Database.from_settings(config)
    app.state.blob_store = blob_store
    app.state.blog_service = BlogService(BlogStore(), blob_store, image_url_prefix="/uploads")

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → GZip → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(blogs.router)
    app.include_router(uploads.router)

    return app


# uvicorn expects `app.main:app` to be importable
app = create_app()

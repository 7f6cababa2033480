"""
Bilarn Blog Backend — Database Handle & Session Management
============================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   `Database` owns one engine (with its connection pool) and one session
       factory. The app factory constructs it, stores it on `app.state`, and
       the lifespan disposes it on shutdown. Route dependencies reach it
       through the incoming request; nothing here is a module-level global.
Who:   Constructed by main.create_app(); used by get_db_session() and the
       health check; constructed directly by tests against SQLite.

Connection Pooling (non-SQLite URLs only):
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour
"""

import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object between the models, create_all() and
    Alembic's autogenerate.
    """
    pass


class Database:
    """
    Owned database handle: one engine plus its session factory.

    Lifecycle:
        1. Constructed at app creation (no connection is opened yet)
        2. create_tables() at startup when DB_CREATE_TABLES is set
        3. Sessions handed out per request by get_db_session()
        4. dispose() at shutdown closes every pooled connection
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 20,
        max_overflow: int = 10,
        pool_pre_ping: bool = True,
        echo: bool = False,
    ):
        engine_kwargs = {"pool_pre_ping": pool_pre_ping, "echo": echo}
        # SQLite pools reject the sizing arguments
        if make_url(url).get_backend_name() != "sqlite":
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,
            )

        self.url = url
        self.engine = create_async_engine(url, **engine_kwargs)

        # expire_on_commit=False: returned ORM objects stay readable after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            echo=settings.log_level == "DEBUG",
        )

    async def create_tables(self) -> None:
        """Create any missing tables for the registered models."""
        # Models must be imported to be registered on Base.metadata
        from app.models.blog import Blog  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def ping(self) -> bool:
        """Run SELECT 1; True when the database answers."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False
        return True

    async def dispose(self) -> None:
        """Close all connections in the pool."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the app's Database handle
        2. Yields it to the route handler
        3. On success: commits anything the handler left pending
        4. On error: rolls back, then re-raises for the exception handlers
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/blogs")
        async def list_blogs(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

"""
Bilarn Blog Backend — Test Configuration (conftest.py)
========================================================

Shared pytest fixtures.

Fixture Hierarchy (all function-scoped):
    ├── test_settings:      Settings pointing at a temp SQLite file and upload dir
    ├── database:           Database handle with tables created, disposed afterwards
    ├── db_session:         AsyncSession on that database
    ├── mock_db_session:    AsyncMock session for orchestration tests
    ├── sample_image_bytes: Minimal JPEG bytes for upload tests
    └── test_client:        HTTPX AsyncClient bound to a fresh create_app()
"""

import os
import tempfile
from unittest.mock import AsyncMock, MagicMock

# Override settings BEFORE any app imports: app.main builds a default app
# from the environment at import time.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="bilarn_test_db_"), "default.db"
)
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="bilarn_test_uploads_")
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from app.config import Settings
from app.database import Database


@pytest.fixture
def test_settings(tmp_path):
    """Settings isolated to this test's temporary directory."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'blog.db'}",
        storage_root=str(tmp_path / "uploads"),
        max_file_size=1024 * 1024,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def database(test_settings):
    """A Database handle with the blogs table created."""
    db = Database.from_settings(test_settings)
    await db.create_tables()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = blog
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: SOI marker + JFIF header + EOI marker."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest_asyncio.fixture
async def blog_app(test_settings, database):
    from app.main import create_app
    return create_app(test_settings, database=database)


@pytest_asyncio.fixture
async def test_client(blog_app):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    ASGITransport does not run the lifespan; the `database` fixture creates
    the tables instead.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/blogs")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=blog_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

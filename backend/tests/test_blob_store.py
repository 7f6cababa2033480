"""
Bilarn Blog Backend — Blob Store Unit Tests
=============================================

Covers filename generation, size limits, writes and path resolution.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from app.exceptions import FileStorageError, NotFoundError, ValidationError
from app.services.blob_store import BlobStore, generate_filename


class TestGenerateFilename:
    """generate_filename is a pure (time, name) → name mapping."""

    def test_timestamp_token_and_extension(self):
        now = datetime(2024, 1, 15, tzinfo=timezone.utc)
        assert generate_filename(now, "cat.png") == "1705276800000000.png"

    def test_microseconds_are_kept(self):
        now = datetime(2024, 1, 15, 0, 0, 0, 123456, tzinfo=timezone.utc)
        assert generate_filename(now, "cat.jpg") == "1705276800123456.jpg"

    def test_extension_case_preserved(self):
        now = datetime(2024, 1, 15, tzinfo=timezone.utc)
        assert generate_filename(now, "photo.JPEG").endswith(".JPEG")

    def test_only_last_extension_kept(self):
        now = datetime(2024, 1, 15, tzinfo=timezone.utc)
        assert generate_filename(now, "archive.tar.gz") == "1705276800000000.gz"

    def test_no_extension(self):
        now = datetime(2024, 1, 15, tzinfo=timezone.utc)
        assert generate_filename(now, "README") == "1705276800000000"

    def test_directory_components_dropped(self):
        now = datetime(2024, 1, 15, tzinfo=timezone.utc)
        assert generate_filename(now, "../../etc/passwd.png") == "1705276800000000.png"

    def test_naive_time_treated_as_utc(self):
        naive = datetime(2024, 1, 15)
        aware = naive.replace(tzinfo=timezone.utc)
        assert generate_filename(naive, "cat.png") == generate_filename(aware, "cat.png")

    def test_deterministic(self):
        now = datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)
        assert generate_filename(now, "a.png") == generate_filename(now, "a.png")

    def test_later_time_sorts_later(self):
        now = datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)
        first = generate_filename(now, "a.png")
        second = generate_filename(now + timedelta(microseconds=1), "a.png")
        assert int(second.split(".")[0]) > int(first.split(".")[0])


class TestBlobStore:
    """Tests for writing and resolving uploaded files."""

    @pytest.fixture(autouse=True)
    def _store(self, tmp_path):
        self.root = tmp_path / "uploads"
        self.store = BlobStore(str(self.root), max_file_size=1024)

    def test_creates_storage_root(self):
        assert self.root.is_dir()

    # ── Size Validation ───────────────────────────────────────────────────

    def test_validate_size_within_limit(self):
        self.store.validate_size(1000)

    def test_validate_size_at_limit(self):
        self.store.validate_size(1024)

    def test_validate_size_over_limit(self):
        with pytest.raises(ValidationError, match="exceeds maximum"):
            self.store.validate_size(1025)

    def test_no_limit_configured(self, tmp_path):
        unlimited = BlobStore(str(tmp_path / "other"))
        unlimited.validate_size(10 * 1024 * 1024)

    # ── Store ─────────────────────────────────────────────────────────────

    @pytest.mark.asyncio
    async def test_store_writes_bytes(self, sample_image_bytes):
        now = datetime(2024, 1, 15, tzinfo=timezone.utc)
        name = await self.store.store(sample_image_bytes, "photo.jpg", now=now)

        assert name == "1705276800000000.jpg"
        assert (self.root / name).read_bytes() == sample_image_bytes

    @pytest.mark.asyncio
    async def test_store_defaults_to_current_time(self, sample_image_bytes):
        name = await self.store.store(sample_image_bytes, "photo.png")

        assert name.endswith(".png")
        assert name.split(".")[0].isdigit()
        assert (self.root / name).exists()

    @pytest.mark.asyncio
    async def test_same_instant_overwrites(self):
        now = datetime(2024, 1, 15, tzinfo=timezone.utc)
        first = await self.store.store(b"first", "a.png", now=now)
        second = await self.store.store(b"second", "b.png", now=now)

        assert first == second
        assert (self.root / second).read_bytes() == b"second"

    @pytest.mark.asyncio
    async def test_store_too_large_writes_nothing(self):
        with pytest.raises(ValidationError):
            await self.store.store(b"x" * 2048, "big.png")
        assert list(self.root.iterdir()) == []

    @pytest.mark.asyncio
    async def test_store_os_error_raises_file_storage_error(self):
        with patch("aiofiles.open", side_effect=OSError("disk full")):
            with pytest.raises(FileStorageError):
                await self.store.store(b"data", "photo.png")

    # ── Resolve ───────────────────────────────────────────────────────────

    @pytest.mark.asyncio
    async def test_resolve_stored_file(self):
        name = await self.store.store(b"data", "photo.png")
        assert self.store.resolve(name) == (self.root / name).resolve()

    def test_resolve_missing_file(self):
        with pytest.raises(NotFoundError):
            self.store.resolve("1705276800000000.png")

    def test_resolve_rejects_path_traversal(self, tmp_path):
        (tmp_path / "secret.txt").write_text("secret")
        with pytest.raises(NotFoundError):
            self.store.resolve("../secret.txt")

    def test_resolve_rejects_directory(self):
        (self.root / "nested").mkdir()
        with pytest.raises(NotFoundError):
            self.store.resolve("nested")

    def test_resolve_rejects_nul_byte(self):
        with pytest.raises(NotFoundError):
            self.store.resolve("a\x00b.png")

"""
Bilarn Blog Backend — Blob Store (Uploaded Image Files)
=========================================================

What:  Writes uploaded image files to local storage and resolves them for serving.
How:   Names each file with a timestamp token plus the original extension,
       writes it asynchronously into a flat storage directory, and hands the
       generated name back to the caller. The caller links the name into a
       blog record only after the write succeeded.
Who:   Used by BlogService (create/update) and the /uploads route (serve).

Directory Structure:
    uploads/
    ├── 1700000000123456.png
    ├── 1700000000456789.jpg
    └── 1700000001000000          (original file had no extension)

Naming:
    The token is microseconds since the Unix epoch at upload time. Two uploads
    landing on the same microsecond with the same extension resolve to the
    same name and the second overwrites the first; this race is accepted.
    Files are never removed when their blog record is updated or deleted.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import aiofiles

from app.exceptions import FileStorageError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def generate_filename(now: datetime, original_filename: str) -> str:
    """
    Map (upload time, original filename) to the stored filename.

    Pure: the same inputs always give the same name. A naive `now` is taken
    to be UTC.

    >>> generate_filename(datetime(2024, 1, 15, tzinfo=timezone.utc), "cat.PNG")
    '1705276800000000.PNG'
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    # Integer arithmetic on the timedelta keeps microsecond precision exact
    delta = now - datetime(1970, 1, 1, tzinfo=timezone.utc)
    token = (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
    return f"{token}{Path(original_filename).suffix}"


class BlobStore:
    """
    Manages the upload directory.

    Lifecycle of an uploaded file:
        1. BlogService calls store() with the raw bytes and original filename
        2. Size check against max_file_size
        3. File is written under a generated name
        4. Name is returned; BlogService turns it into "/uploads/<name>"
        5. GET /uploads/<name> calls resolve() to serve the bytes
    """

    def __init__(self, storage_root: str, max_file_size: Optional[int] = None):
        """
        Args:
            storage_root: Directory for uploaded files (created if missing).
            max_file_size: Upper bound in bytes; None disables the check.
        """
        self.storage_root = Path(storage_root).resolve()
        self.max_file_size = max_file_size
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("BlobStore initialized with storage_root=%s", self.storage_root)

    def validate_size(self, actual_size: int) -> None:
        """
        Reject uploads above the configured maximum.

        Raises:
            ValidationError with human-readable size limit message
        """
        if self.max_file_size is None or actual_size <= self.max_file_size:
            return
        max_mb = self.max_file_size / (1024 * 1024)
        raise ValidationError(
            message=(
                f"File size ({actual_size / (1024 * 1024):.1f}MB) "
                f"exceeds maximum of {max_mb:.1f}MB."
            ),
            field="image",
            context={"max_size": self.max_file_size, "actual_size": actual_size},
        )

    async def store(
        self,
        content: bytes,
        original_filename: str,
        now: Optional[datetime] = None,
    ) -> str:
        """
        Write an uploaded file to disk.

        Args:
            content: Raw file bytes
            original_filename: Client-side filename; only its extension is kept
            now: Upload instant (defaults to the current UTC time)

        Returns:
            The generated filename, relative to storage_root.

        Raises:
            ValidationError if the file is too large.
            FileStorageError if the directory or file cannot be written.
        """
        self.validate_size(len(content))

        name = generate_filename(now or datetime.now(timezone.utc), original_filename)
        absolute_path = self.storage_root / name

        try:
            self.storage_root.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            )

        logger.info("File stored: %s (%d bytes)", name, len(content))
        return name

    def resolve(self, relative_path: str) -> Path:
        """
        Map a stored name back to its file on disk.

        Raises:
            NotFoundError if the file does not exist or the path points
            outside storage_root (e.g. "../../etc/passwd"). Paths the OS cannot
            represent (embedded NUL, overlong names) are not found either.
        """
        try:
            full_path = (self.storage_root / relative_path).resolve()
            found = full_path.is_relative_to(self.storage_root) and full_path.is_file()
        except (ValueError, OSError):
            found = False

        if not found:
            raise NotFoundError(
                resource="file",
                resource_id=relative_path,
                message="File not found",
            )
        return full_path

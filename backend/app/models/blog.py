"""
Bilarn Blog Backend — Blog SQLAlchemy Model
=============================================

What:  ORM model representing the `blogs` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by BlogStore for CRUD operations and by Alembic for schema management.

Table Design:
    - UUID primary key: opaque, assigned on insert, never reused
    - content: Markdown source, stored verbatim (rendered only on read)
    - image_url: "/uploads/<name>" reference into the blob store, nullable
    - creator: free-text username, required, never verified
    - created_at: UTC, set once on insert, untouched by updates

    Index on created_at DESC backs the list query (newest first).
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Blog(Base):
    """
    A single blog post.

    Lifecycle:
        1. Created by POST /blogs (after any attached image is written)
        2. Read by GET /blogs and GET /blogs/{id}
        3. Updated by PUT /blogs/{id}: title/content replaced, image_url
           replaced only when a new file is attached
        4. Deleted by DELETE /blogs/{id}; the image file stays on disk
    """

    __tablename__ = "blogs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Opaque identifier assigned at creation",
    )

    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Post title",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Markdown source of the post body",
    )

    image_url: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        default=None,
        comment="URL path of the uploaded image, e.g. /uploads/1700000000000000.png",
    )

    creator: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Free-text username of the author",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="When the post was created (UTC)",
    )

    def __repr__(self) -> str:
        return f"<Blog(id={self.id}, title='{self.title}', created_at='{self.created_at}')>"


# Backs the list query: ORDER BY created_at DESC
Index("idx_blogs_created_at", Blog.created_at.desc())

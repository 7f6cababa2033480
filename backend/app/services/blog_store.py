"""
Bilarn Blog Backend — Blog Record Store
=========================================

What:  CRUD operations on the `blogs` table.
How:   Each method takes the request's AsyncSession, runs one logical
       operation and commits it. Missing rows become NotFoundError,
       blank required fields become ValidationError, and SQLAlchemy
       failures are wrapped in DatabaseError.
Who:   Called by BlogService; tested directly against SQLite.

Identifiers:
    Ids are UUIDs. A string that does not parse as a UUID cannot name any
    record, so it is reported as NotFoundError like an unknown id.

Concurrency:
    No locking and no version column. Concurrent updates to the same id are
    last-write-wins at the database.
"""

import logging
import uuid
from typing import List, Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, NotFoundError, ValidationError
from app.models.blog import Blog

logger = logging.getLogger(__name__)

BlogId = Union[str, uuid.UUID]


def validate_fields(**fields: Optional[str]) -> None:
    """
    Raise ValidationError for the first missing or blank field.

    Example:
        validate_fields(title=title, content=content, creator=creator)
    """
    for name, value in fields.items():
        if value is None or not value.strip():
            raise ValidationError(message=f"{name} is required", field=name)


def parse_blog_id(blog_id: BlogId) -> uuid.UUID:
    if isinstance(blog_id, uuid.UUID):
        return blog_id
    try:
        return uuid.UUID(str(blog_id))
    except ValueError:
        raise NotFoundError(
            resource="blog",
            resource_id=str(blog_id),
            context={"reason": "malformed id"},
        )


class BlogStore:
    """
    Persistence for blog posts.

    Operations:
        - create():       insert a new post
        - list_all():     every post, newest first
        - get_by_id():    one post or NotFoundError
        - update_by_id(): replace title/content, optionally image_url
        - delete_by_id(): permanent removal
    """

    async def create(
        self,
        db: AsyncSession,
        title: Optional[str],
        content: Optional[str],
        creator: Optional[str],
        image_url: Optional[str] = None,
    ) -> Blog:
        """
        Insert a new post. id and created_at are assigned here.

        Raises:
            ValidationError: title, content or creator missing/blank
            DatabaseError: insert or commit failed
        """
        validate_fields(title=title, content=content, creator=creator)

        blog = Blog(title=title, content=content, creator=creator, image_url=image_url)
        try:
            db.add(blog)
            await db.flush()
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise self._database_error("create", e)

        logger.info("Blog created: %s", blog.id)
        return blog

    async def list_all(self, db: AsyncSession) -> List[Blog]:
        """All posts ordered by created_at descending; [] when empty."""
        try:
            result = await db.execute(select(Blog).order_by(Blog.created_at.desc()))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise self._database_error("list", e)

    async def get_by_id(self, db: AsyncSession, blog_id: BlogId) -> Blog:
        """
        Fetch one post.

        Raises:
            NotFoundError: no post has this id, or the id is malformed
            DatabaseError: query failed
        """
        key = parse_blog_id(blog_id)
        try:
            result = await db.execute(select(Blog).where(Blog.id == key))
            blog = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._database_error("get", e)

        if blog is None:
            raise NotFoundError(resource="blog", resource_id=str(key))
        return blog

    async def update_by_id(
        self,
        db: AsyncSession,
        blog_id: BlogId,
        title: Optional[str],
        content: Optional[str],
        image_url: Optional[str] = None,
    ) -> Blog:
        """
        Replace title and content; replace image_url only when one is given.

        creator, created_at and id are never modified.

        Raises:
            ValidationError: title or content missing/blank
            NotFoundError: no post has this id
            DatabaseError: update or commit failed
        """
        validate_fields(title=title, content=content)
        blog = await self.get_by_id(db, blog_id)

        blog.title = title
        blog.content = content
        if image_url is not None:
            blog.image_url = image_url

        try:
            await db.flush()
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise self._database_error("update", e)

        logger.info("Blog updated: %s", blog.id)
        return blog

    async def delete_by_id(self, db: AsyncSession, blog_id: BlogId) -> None:
        """
        Permanently remove a post. Its image file is left in the blob store.

        Raises:
            NotFoundError: no post has this id
            DatabaseError: delete or commit failed
        """
        blog = await self.get_by_id(db, blog_id)
        try:
            await db.delete(blog)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise self._database_error("delete", e)

        logger.info("Blog deleted: %s", blog.id)

    @staticmethod
    def _database_error(operation: str, error: SQLAlchemyError) -> DatabaseError:
        logger.error("Database error during %s: %s", operation, str(error))
        return DatabaseError(
            context={"operation": operation, "original_error": type(error).__name__},
        )

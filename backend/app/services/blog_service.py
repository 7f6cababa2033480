"""
Bilarn Blog Backend — Blog Service (Request Orchestration)
============================================================

What:  Turns route inputs into record store / blob store operations and
       shapes the results into response models.
How:   Composes BlogStore, BlobStore and the Markdown renderer, all passed in
       at construction. Holds no per-request state.
Who:   Constructed once by create_app(); reached by routes via get_blog_service().

Create / Update Flow:
    ┌──────────┐    ┌────────────┐    ┌─────────────┐    ┌──────────────┐
    │  Route   │───▶│  Validate  │───▶│  BlobStore  │───▶│  BlogStore   │
    │  (form)  │    │  fields    │    │  (if image) │    │  (DB write)  │
    └──────────┘    └────────────┘    └─────────────┘    └──────────────┘

    The image is written before the record that links to it. If the record
    write then fails, the file stays on disk and the error propagates;
    there is no compensating delete.
"""

import logging
from dataclasses import dataclass
from datetime import timezone
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.blog import Blog
from app.schemas.blog import BlogDetailResponse, BlogResponse, DeleteResponse
from app.services import markdown_renderer
from app.services.blob_store import BlobStore
from app.services.blog_store import BlogId, BlogStore, validate_fields

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedImage:
    """An image file received with a create or update request."""
    filename: str
    content: bytes


class BlogService:
    """
    Business logic for the /blogs endpoints.

    Responsibilities:
        - create_blog(): validate → store image → insert
        - list_blogs():  newest first, raw Markdown
        - get_blog():    single post plus rendered HTML
        - update_blog(): validate → confirm exists → store image → update
        - delete_blog(): remove the record, leave the image
    """

    def __init__(
        self,
        blog_store: BlogStore,
        blob_store: BlobStore,
        image_url_prefix: str = "/uploads",
    ):
        self.blog_store = blog_store
        self.blob_store = blob_store
        self.image_url_prefix = image_url_prefix.rstrip("/")

    async def create_blog(
        self,
        db: AsyncSession,
        title: Optional[str],
        content: Optional[str],
        creator: Optional[str],
        image: Optional[UploadedImage] = None,
    ) -> BlogResponse:
        """
        Create a post, writing its image first when one is attached.

        Raises:
            ValidationError: missing field or oversized image (nothing is written)
            FileStorageError: image could not be written
            DatabaseError: insert failed (an already written image remains)
        """
        validate_fields(title=title, content=content, creator=creator)

        image_url = await self._store_image(image)
        blog = await self.blog_store.create(
            db,
            title=title,
            content=content,
            creator=creator,
            image_url=image_url,
        )
        return self._to_response(blog)

    async def list_blogs(self, db: AsyncSession) -> List[BlogResponse]:
        blogs = await self.blog_store.list_all(db)
        return [self._to_response(blog) for blog in blogs]

    async def get_blog(self, db: AsyncSession, blog_id: BlogId) -> BlogDetailResponse:
        """Fetch one post and render its Markdown; nothing is cached."""
        blog = await self.blog_store.get_by_id(db, blog_id)
        return BlogDetailResponse(
            **self._fields(blog),
            html_content=markdown_renderer.render(blog.content),
        )

    async def update_blog(
        self,
        db: AsyncSession,
        blog_id: BlogId,
        title: Optional[str],
        content: Optional[str],
        image: Optional[UploadedImage] = None,
    ) -> BlogResponse:
        """
        Replace title/content, and the image when a new one is attached.

        The record is looked up before the image is written, so an unknown id
        never leaves a file behind.

        Raises:
            ValidationError: title/content missing, or oversized image
            NotFoundError: unknown or malformed id
            FileStorageError / DatabaseError: write failures
        """
        validate_fields(title=title, content=content)
        await self.blog_store.get_by_id(db, blog_id)

        image_url = await self._store_image(image)
        blog = await self.blog_store.update_by_id(
            db,
            blog_id,
            title=title,
            content=content,
            image_url=image_url,
        )
        return self._to_response(blog)

    async def delete_blog(self, db: AsyncSession, blog_id: BlogId) -> DeleteResponse:
        await self.blog_store.delete_by_id(db, blog_id)
        return DeleteResponse(message="Blog deleted")

    async def _store_image(self, image: Optional[UploadedImage]) -> Optional[str]:
        if image is None:
            return None
        name = await self.blob_store.store(image.content, image.filename)
        return f"{self.image_url_prefix}/{name}"

    @staticmethod
    def _fields(blog: Blog) -> dict:
        created_at = blog.created_at
        # SQLite hands back naive datetimes; every stored value is UTC
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return {
            "id": blog.id,
            "title": blog.title,
            "content": blog.content,
            "image_url": blog.image_url,
            "creator": blog.creator,
            "created_at": created_at,
        }

    def _to_response(self, blog: Blog) -> BlogResponse:
        return BlogResponse(**self._fields(blog))

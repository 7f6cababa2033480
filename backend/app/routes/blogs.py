"""
Bilarn Blog Backend — Blog Route Handlers
===========================================

What:  CRUD endpoints under /blogs.
How:   Extracts form fields and the optional `image` upload, delegates to
       BlogService, returns response models. Errors are raised as
       application exceptions and formatted by the handlers in main.py.

Route Inventory:
    POST   /blogs        create (multipart: title, content, creator, image?)
    GET    /blogs        list, newest first
    GET    /blogs/{id}   single post with htmlContent
    PUT    /blogs/{id}   update (multipart: title, content, image?)
    DELETE /blogs/{id}   delete

Required form fields are declared optional here so that a missing field
reaches BlogService and is reported as a 400, not FastAPI's default 422.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.blog import (
    BlogDetailResponse,
    BlogResponse,
    DeleteResponse,
    ErrorResponse,
)
from app.services.blog_service import BlogService, UploadedImage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/blogs", tags=["Blogs"])


def get_blog_service(request: Request) -> BlogService:
    return request.app.state.blog_service


async def read_upload(upload: Optional[UploadFile]) -> Optional[UploadedImage]:
    """
    Read an optional multipart file into memory and close it.

    A file part with an empty filename (a form submitted with no file chosen)
    counts as no file.
    """
    if upload is None or not upload.filename:
        return None
    try:
        content = await upload.read()
    finally:
        await upload.close()

    logger.info("Received upload: filename=%s, size=%d bytes", upload.filename, len(content))
    return UploadedImage(filename=upload.filename, content=content)


@router.post(
    "",
    status_code=201,
    response_model=BlogResponse,
    response_model_exclude_none=True,
    responses={
        400: {"description": "Missing required field", "model": ErrorResponse},
    },
    summary="Create a blog post",
)
async def create_blog(
    title: Optional[str] = Form(default=None),
    content: Optional[str] = Form(default=None, description="Markdown source"),
    creator: Optional[str] = Form(default=None),
    image: Optional[UploadFile] = File(default=None),
    db: AsyncSession = Depends(get_db_session),
    service: BlogService = Depends(get_blog_service),
) -> BlogResponse:
    upload = await read_upload(image)
    return await service.create_blog(
        db,
        title=title,
        content=content,
        creator=creator,
        image=upload,
    )


@router.get(
    "",
    response_model=List[BlogResponse],
    response_model_exclude_none=True,
    responses={
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List all blog posts, newest first",
)
async def list_blogs(
    db: AsyncSession = Depends(get_db_session),
    service: BlogService = Depends(get_blog_service),
) -> List[BlogResponse]:
    return await service.list_blogs(db)


@router.get(
    "/{blog_id}",
    response_model=BlogDetailResponse,
    response_model_exclude_none=True,
    responses={
        404: {"description": "Blog not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a blog post with its Markdown rendered to HTML",
)
async def get_blog(
    blog_id: str,
    db: AsyncSession = Depends(get_db_session),
    service: BlogService = Depends(get_blog_service),
) -> BlogDetailResponse:
    # blog_id stays a plain string: a malformed id is a 404, not a 422
    return await service.get_blog(db, blog_id)


@router.put(
    "/{blog_id}",
    response_model=BlogResponse,
    response_model_exclude_none=True,
    responses={
        400: {"description": "Missing required field", "model": ErrorResponse},
        404: {"description": "Blog not found", "model": ErrorResponse},
    },
    summary="Update a blog post",
)
async def update_blog(
    blog_id: str,
    title: Optional[str] = Form(default=None),
    content: Optional[str] = Form(default=None, description="Markdown source"),
    image: Optional[UploadFile] = File(default=None),
    db: AsyncSession = Depends(get_db_session),
    service: BlogService = Depends(get_blog_service),
) -> BlogResponse:
    upload = await read_upload(image)
    return await service.update_blog(
        db,
        blog_id,
        title=title,
        content=content,
        image=upload,
    )


@router.delete(
    "/{blog_id}",
    response_model=DeleteResponse,
    responses={
        404: {"description": "Blog not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a blog post",
)
async def delete_blog(
    blog_id: str,
    db: AsyncSession = Depends(get_db_session),
    service: BlogService = Depends(get_blog_service),
) -> DeleteResponse:
    return await service.delete_blog(db, blog_id)

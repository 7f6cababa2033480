"""
Bilarn Blog Backend — Uploaded File Route
===========================================

What:  GET /uploads/{file_path} serves images previously written by the
       BlobStore, under the same path stored in a post's imageUrl.
How:   BlobStore.resolve() maps the name to a file inside the storage root
       (NotFoundError otherwise); FileResponse streams it with a media type
       guessed from the extension.
"""

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse

from app.schemas.blog import ErrorResponse
from app.services.blob_store import BlobStore

router = APIRouter(tags=["Uploads"])


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store


@router.get(
    "/uploads/{file_path:path}",
    summary="Serve an uploaded image",
    responses={
        200: {"description": "Image file"},
        404: {"description": "File not found", "model": ErrorResponse},
    },
)
async def serve_upload(file_path: str, request: Request) -> FileResponse:
    full_path = get_blob_store(request).resolve(file_path)
    return FileResponse(
        path=str(full_path),
        headers={"Cache-Control": "public, max-age=86400"},
    )

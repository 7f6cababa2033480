"""
Bilarn Blog Backend — Pydantic Request/Response Schemas
=========================================================

What:  Pydantic models defining the API contract.
How:   FastAPI serializes route return values through these models and
       generates the OpenAPI docs from them.

Wire format:
    Field names are snake_case in Python and camelCase on the wire
    (alias, with populate_by_name), e.g. image_url → "imageUrl". FastAPI serializes
    response models by alias; Python code constructs them by field name.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class BlogResponse(BaseModel):
    """
    What:  A stored blog post as returned by create, list and update.
    Note:  `content` is the raw Markdown source; no HTML here.
    """
    id: uuid.UUID = Field(description="Opaque post identifier")
    title: str = Field(description="Post title")
    content: str = Field(description="Markdown source of the post body")
    image_url: Optional[str] = Field(
        default=None,
        alias="imageUrl",
        description="URL path of the uploaded image; omitted when none was attached",
    )
    creator: str = Field(description="Free-text username of the author")
    created_at: datetime = Field(
        alias="createdAt",
        description="When the post was created (UTC ISO 8601)",
    )

    model_config = {"from_attributes": True, "populate_by_name": True}


class BlogDetailResponse(BlogResponse):
    """
    What:  Single-post view returned by GET /blogs/{id}.
    Adds:  html_content, the Markdown rendered fresh on every read.
    """
    html_content: str = Field(
        alias="htmlContent",
        description="HTML rendering of content",
    )


class DeleteResponse(BaseModel):
    """Acknowledgment returned by DELETE /blogs/{id}."""
    message: str = Field(default="Blog deleted")


# ══════════════════════════════════════════════════════════════════════════
# Error & Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Error body shared by every failing endpoint.

    Example:
        {
            "error": "Blog not found",
            "request_id": "550e8400"
        }
    """
    error: str = Field(description="Human-readable error message")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")

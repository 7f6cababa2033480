"""
Bilarn Blog Backend — Custom Exception Hierarchy
==================================================

What:  Application-specific exceptions for the blog API's failure modes.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return JSON error bodies with the matching HTTP status code.
Who:   Raised by the record store, blob store and blog service; caught by
       the handlers in main.py.

Exception Hierarchy:
    BlogApiError (base)
    ├── ValidationError     → 400 Bad Request
    ├── NotFoundError       → 404 Not Found
    ├── FileStorageError    → 500 Internal Server Error
    └── DatabaseError       → 500 Internal Server Error

No retries happen anywhere: every operation is single-attempt and the
error is surfaced to the caller directly.
"""

from typing import Any, Dict, Optional


class BlogApiError(Exception):
    """
    Base exception for all blog API errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only for validation errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BlogApiError):
    """
    Raised when client input fails validation.

    When:    A required form field (title, content, creator) is missing or
             blank, an upload exceeds the size limit, or the request body
             cannot be parsed.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "title is required",
            "details": {"field": "title"},
            "request_id": "a1b2c3d4"
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(BlogApiError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PUT/DELETE /blogs/{id} with an unknown or malformed id,
             or GET /uploads/{name} for a file that was never stored.
    HTTP:    404 Not Found

    The record store returns None for missing rows; the conversion to
    NotFoundError happens there so routes stay free of lookups.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class FileStorageError(BlogApiError):
    """
    Raised when writing or reading an uploaded file fails.

    When:    Disk full, permission denied, directory not writable, I/O error.
    HTTP:    500 Internal Server Error

    A record write that fails after a successful file write leaves the file
    on disk; nothing is rolled back.
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(BlogApiError):
    """
    Raised when a database operation fails unexpectedly.

    When:    Connection lost mid-query, constraint violation, driver error.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; the driver error
    is kept in ``context`` and logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

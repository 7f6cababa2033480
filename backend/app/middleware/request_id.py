"""
Bilarn Blog Backend — Request ID Middleware
=============================================

What:  Tags every request with a correlation ID and echoes it back in the
       X-Request-ID response header.
How:   Uses the client's X-Request-ID when present, otherwise a short random
       hex ID. The value lives in a ContextVar so log statements and the
       exception handlers in main.py can read it without a request object.

Unhandled errors:
    Exceptions with no registered handler would otherwise reach Starlette's
    ServerErrorMiddleware, which runs outside this middleware and so has no
    request ID. They are caught here, logged, and turned into the standard
    500 error body carrying the ID.
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

# Coroutine-local: each in-flight request sees its own value
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns request.state.request_id and the request_id_var context value."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or new_request_id()

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "[%s] Unexpected error: %s",
                rid,
                str(exc),
                exc_info=True,
            )
            response = JSONResponse(
                status_code=500,
                content={"error": UNEXPECTED_ERROR_MESSAGE, "request_id": rid},
            )
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response

"""Middleware: request body limits derived from the document size limit."""

from __future__ import annotations

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

logger = logging.getLogger("schemaline.api")

_DOCUMENT_PATHS = ("/validate", "/locate")
_MAX_BODY_DEFAULT = 1 * 1024 * 1024  # 1 MB for everything else
_ENVELOPE_BYTES = 64 * 1024  # request fields around the document text
# worst case of JSON string escaping: "\u0001" is six bytes for one character
_MAX_BYTES_PER_CHAR = 6


def document_body_limit(max_document_size: int) -> int:
    """Largest request body that can carry a document of ``max_document_size`` chars."""
    return max_document_size * _MAX_BYTES_PER_CHAR + _ENVELOPE_BYTES


def _too_large(limit: int) -> JSONResponse:
    return JSONResponse(
        status_code=413,
        content={"detail": f"Request body too large (max {limit:,} bytes)"},
    )


class RequestBodyLimitMiddleware(BaseHTTPMiddleware):
    """Reject request bodies no acceptable document could need.

    ``/validate`` and ``/locate`` accept bodies big enough for any document
    within ``max_document_size`` characters; the loader enforces the exact
    character limit.  Other endpoints are capped at 1 MB.  Streamed bodies
    are counted too, so chunked uploads cannot bypass the limit.
    """

    def __init__(
        self,
        app: ASGIApp,
        max_document_size: int,
        default_limit: int = _MAX_BODY_DEFAULT,
    ) -> None:
        super().__init__(app)
        self.document_limit = document_body_limit(max_document_size)
        self.default_limit = default_limit

    def limit_for(self, path: str) -> int:
        return self.document_limit if path.endswith(_DOCUMENT_PATHS) else self.default_limit

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        limit = self.limit_for(request.url.path)

        try:
            declared = int(request.headers.get("content-length", ""))
        except ValueError:
            declared = None
        if declared is not None and declared > limit:
            logger.info("Rejected %s: declared body of %d bytes", request.url.path, declared)
            return _too_large(limit)

        if request.method in ("POST", "PUT", "PATCH"):
            body = bytearray()
            async for chunk in request.stream():
                body.extend(chunk)
                if len(body) > limit:
                    logger.info("Rejected %s: streamed body over %d bytes", request.url.path, limit)
                    return _too_large(limit)
            request._body = bytes(body)  # noqa: SLF001

        return await call_next(request)

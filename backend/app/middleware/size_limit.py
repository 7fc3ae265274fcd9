"""Upload size limit middleware."""

import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from app.config import settings

logger = logging.getLogger(__name__)


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject uploads larger than the configured limit.

    Base64 PDFs arrive in a single JSON body, so the Content-Length header
    is checked before the body is read.
    """

    def __init__(self, app, max_size: int | None = None):
        super().__init__(app)
        self.max_size = max_size or settings.max_request_size_bytes

    async def dispatch(self, request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit():
            size = int(content_length)
            if size > self.max_size:
                logger.warning(
                    f"Upload too large: {size} bytes (max: {self.max_size})",
                    extra={"content_length": size, "path": request.url.path},
                )
                return JSONResponse(
                    status_code=413,
                    content={"error": f"Upload exceeds maximum size of {self.max_size} bytes"},
                )

        return await call_next(request)

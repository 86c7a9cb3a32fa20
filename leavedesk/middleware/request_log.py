"""Request logging middleware.

Assigns every request an id, stores it in a request-scoped context variable
so log lines emitted further down can be correlated, and logs one access
line per request once the response is ready.
"""

import logging
import time
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

# Context variable holding the current request id
_current_request_id: ContextVar[Optional[str]] = ContextVar("current_request_id", default=None)


def get_request_id() -> Optional[str]:
    """Return the id assigned to the request being handled, if any."""
    return _current_request_id.get()


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log method, path, status and latency.

    An incoming ``X-Request-ID`` header is reused; otherwise a short random id
    is generated. The id is echoed back on the response.
    """

    header_name = "X-Request-ID"

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(self.header_name) or uuid.uuid4().hex[:12]
        token = _current_request_id.set(request_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "[%s] %s %s failed", request_id, request.method, request.url.path
            )
            raise
        finally:
            _current_request_id.reset(token)

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "[%s] %s %s -> %d (%.1fms)",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        response.headers[self.header_name] = request_id
        return response

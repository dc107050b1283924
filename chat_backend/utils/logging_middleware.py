"""Per-request access logging."""

from __future__ import annotations

import time

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from .helpers import new_identifier

REQUEST_ID_HEADER = "x-request-id"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log start, end and duration of every request under a request id.

    The id is taken from the ``x-request-id`` header when the client sends
    one, generated otherwise, and echoed on the response.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or new_identifier()
        request.state.request_id = request_id

        with logger.contextualize(request_id=request_id):
            logger.info("[START] request_id={} {} {}", request_id, request.method, request.url.path)
            try:
                response = await call_next(request)
            except Exception as exc:
                duration_ms = int((time.perf_counter() - start) * 1000)
                logger.error(
                    "[ERROR] request_id={} duration_ms={} err={!r}",
                    request_id,
                    duration_ms,
                    exc,
                )
                raise

            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.info(
                "[END] request_id={} status={} duration_ms={}",
                request_id,
                response.status_code,
                duration_ms,
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response

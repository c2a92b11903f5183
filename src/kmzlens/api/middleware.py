"""
Request correlation and logging middleware.
"""

import logging
import time
import uuid
from typing import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from kmzlens.core.logging_config import LogContext

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

CallNext = Callable[[Request], Awaitable[Response]]


class RequestCorrelationMiddleware(BaseHTTPMiddleware):
    """
    Give every request an ID and echo it in the response headers.

    A client supplied X-Request-ID is reused; otherwise a UUID4 is generated.
    The ID is stored on `request.state.request_id` for handlers and error
    responses.
    """

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        request_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.request_id = request_id
        route = f"{request.method} {request.url.path}"

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.exception(f"{route} raised after {elapsed_ms:.2f}ms")
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[self.header_name] = request_id
        logger.info(f"{route} -> {response.status_code} in {elapsed_ms:.2f}ms")
        return response


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """
    Add the request method, path and ID to every log record of a request.

    Must be installed inside RequestCorrelationMiddleware so the ID is set.
    """

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        fields = {"http_method": request.method, "request_path": request.url.path}
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            fields["request_id"] = request_id

        with LogContext(**fields):
            return await call_next(request)

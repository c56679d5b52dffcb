"""
Access logging middleware
"""

import time
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from video_curator.core.logging_config import request_logger


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and timing of every request"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        started = time.perf_counter()

        response = await call_next(request)

        request_logger.log_request(
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            response_time=time.perf_counter() - started,
            ip_address=request.client.host if request.client else "unknown",
            request_id=request_id
        )
        response.headers["X-Request-ID"] = request_id
        return response

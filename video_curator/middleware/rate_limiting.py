"""
Rate limiting middleware for API protection
"""

import time
import ipaddress
from collections import defaultdict, deque
from typing import Deque, Dict, Tuple

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
import structlog

logger = structlog.get_logger()


class RateLimiter:
    """In-memory rate limiter with sliding window"""

    CLEANUP_INTERVAL = 300

    def __init__(self):
        # Store request timestamps for each IP
        self.requests: Dict[str, Deque[float]] = defaultdict(deque)
        self._last_cleanup = time.monotonic()

    def is_allowed(self, ip: str, limit: int, window: int, now: float = None) -> Tuple[bool, int]:
        """
        Check if request is allowed based on rate limit
        Returns (is_allowed, retry_after_seconds)
        """
        current_time = time.monotonic() if now is None else now
        self._maybe_cleanup(current_time, window)

        # Drop requests outside the window
        requests = self.requests[ip]
        while requests and requests[0] <= current_time - window:
            requests.popleft()

        if len(requests) >= limit:
            retry_after = max(1, int(requests[0] + window - current_time))
            return False, retry_after

        requests.append(current_time)
        return True, 0

    def remaining(self, ip: str, limit: int) -> int:
        return max(0, limit - len(self.requests.get(ip, ())))

    def _maybe_cleanup(self, current_time: float, window: int):
        """Forget idle clients so the table does not grow without bound"""
        if current_time - self._last_cleanup < self.CLEANUP_INTERVAL:
            return
        self._last_cleanup = current_time
        for ip in list(self.requests.keys()):
            requests = self.requests[ip]
            while requests and requests[0] <= current_time - window:
                requests.popleft()
            if not requests:
                del self.requests[ip]


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-IP request limit over a sliding window"""

    def __init__(self, app, default_limit: int = 100, default_window: int = 900):
        super().__init__(app)
        self.rate_limiter = RateLimiter()
        self.default_limit = default_limit
        self.default_window = default_window

        # Whitelist for internal IPs
        self.whitelist = [
            ipaddress.ip_network("127.0.0.0/8"),  # Localhost
            ipaddress.ip_network("10.0.0.0/8"),   # Private network
            ipaddress.ip_network("172.16.0.0/12"), # Private network
            ipaddress.ip_network("192.168.0.0/16"), # Private network
        ]

    def get_client_ip(self, request: Request) -> str:
        """Get client IP address from request"""
        # Check for forwarded headers (when behind proxy)
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

        return request.client.host if request.client else "unknown"

    def is_whitelisted(self, ip: str) -> bool:
        """Check if IP is in whitelist"""
        try:
            client_ip = ipaddress.ip_address(ip)
            return any(client_ip in network for network in self.whitelist)
        except ValueError:
            return False

    async def dispatch(self, request: Request, call_next) -> Response:
        """Process request with rate limiting"""
        client_ip = self.get_client_ip(request)

        if request.url.path == "/health" or self.is_whitelisted(client_ip):
            return await call_next(request)

        limit, window = self.default_limit, self.default_window
        is_allowed, retry_after = self.rate_limiter.is_allowed(client_ip, limit, window)

        if not is_allowed:
            logger.warning("Rate limit exceeded", ip_address=client_ip, path=request.url.path)
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "success": False,
                    "message": "Too many requests from this IP, please try again later.",
                    "error_type": "RateLimitExceeded"
                },
                headers={"Retry-After": str(retry_after)}
            )

        response = await call_next(request)

        response.headers["X-RateLimit-Limit"] = str(limit)
        response.headers["X-RateLimit-Remaining"] = str(self.rate_limiter.remaining(client_ip, limit))

        return response

# Request Logging Middleware with Correlation IDs
# Tags each request with a request_id and logs it with timing

import uuid
import time
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("keyword_crawler.api")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that:
    1. Assigns a request ID (or reuses the caller's X-Request-ID)
    2. Logs each request and its outcome with timing and client IP
    3. Echoes the request ID back in the response headers
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
        request.state.request_id = request_id
        client_ip = self._get_client_ip(request)
        start_time = time.perf_counter()

        logger.info(
            f"[IP: {client_ip}] {request.method} {request.url.path} started",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "user_ip": client_ip,
            },
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"Request failed [{client_ip}] {request.method} {request.url.path} - {e}",
                extra={
                    "request_id": request_id,
                    "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
                },
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"[IP: {client_ip}] {request.method} {request.url.path} -> {response.status_code}",
            extra={
                "request_id": request_id,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )

        response.headers["X-Request-ID"] = request_id
        return response

    def _get_client_ip(self, request: Request) -> str:
        """Get client IP from reverse proxy headers or the direct connection."""
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

        if request.client:
            return request.client.host

        return "unknown"

"""
Request logging middleware for FastAPI using Loguru.

Logs every incoming request and its response with timing and client
details, and tags responses with an X-Request-ID header.
"""

import time
import uuid
from contextvars import ContextVar
from typing import Optional

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

# Context variable to store request ID across async context
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def get_client_ip(request: Request) -> Optional[str]:
    """Client address, preferring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    return request.client.host if request.client else None


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log request and response metadata for each HTTP call."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request_id_var.set(request_id)

        request_logger = logger.bind(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_ip=get_client_ip(request),
        )
        request_logger.info(
            "Incoming request",
            user_agent=request.headers.get("user-agent"),
        )

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)

        response.headers["X-Request-ID"] = request_id

        if response.status_code >= 500:
            log = request_logger.error
            message = "Error response"
        elif response.status_code >= 400:
            log = request_logger.warning
            message = "Error response"
        else:
            log = request_logger.info
            message = "Response sent"

        log(message, status_code=response.status_code, duration_ms=duration_ms)
        return response

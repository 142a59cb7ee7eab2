"""HTTP middleware for the URL shortener application."""

from shortlink.middleware.logging import RequestLoggingMiddleware, get_client_ip

__all__ = ["RequestLoggingMiddleware", "get_client_ip"]

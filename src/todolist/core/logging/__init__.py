"""Logging module with structured logging and request tracking."""

from todolist.core.logging.middleware import RequestLoggingMiddleware, get_client_ip


__all__ = [
    "RequestLoggingMiddleware",
    "get_client_ip",
]

"""Structured logging setup and request logging."""

from rbac_admin.core.logging.middleware import RequestLoggingMiddleware, configure_logging


__all__ = [
    "RequestLoggingMiddleware",
    "configure_logging",
]

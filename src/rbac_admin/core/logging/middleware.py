"""Request logging middleware.

This module provides middleware for logging HTTP requests and responses
with structured logging via structlog, plus the structlog configuration
shared by the API and the CLI.
"""

import logging
import time
from typing import Any

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint


logger = structlog.get_logger()


def configure_logging(log_level: str = "INFO", json_output: bool = False) -> None:
    """Configure structlog processors and the minimum level.

    Args:
        log_level: Level name, e.g. "INFO" or "DEBUG"
        json_output: Render JSON lines instead of the console format
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            (
                structlog.processors.JSONRenderer()
                if json_output
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that logs all HTTP requests and responses.

    Logs include:
    - Request method, path, and query parameters
    - Response status code
    - Request duration
    - Request ID (if set by RequestIdMiddleware)
    - User ID (if a valid bearer token was sent)
    """

    def __init__(
        self,
        app: Any,
        exclude_paths: list[str] | None = None,
    ) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI application
            exclude_paths: Path prefixes to skip (e.g., health checks)
        """
        super().__init__(app)
        self.exclude_paths = exclude_paths or [
            "/health/live",
            "/health/ready",
            "/docs",
            "/redoc",
            "/openapi.json",
        ]

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if any(request.url.path.startswith(path) for path in self.exclude_paths):
            return await call_next(request)

        start_time = time.perf_counter()

        request_id = getattr(request.state, "request_id", None)
        method = request.method
        path = request.url.path

        log_data: dict[str, Any] = {
            "method": method,
            "path": path,
            "client_ip": get_client_ip(request),
        }
        if request.url.query:
            log_data["query"] = str(request.url.query)
        if request_id:
            log_data["request_id"] = request_id

        logger.info("request_started", **log_data)

        try:
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.exception(
                "request_failed",
                method=method,
                path=path,
                duration_ms=round(duration_ms, 2),
                error=str(exc),
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000

        completion_data: dict[str, Any] = {
            "method": method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
        }
        if request_id:
            completion_data["request_id"] = request_id

        user_id = getattr(request.state, "user_id", None)
        if user_id:
            completion_data["user_id"] = str(user_id)

        if response.status_code >= 500:
            logger.error("request_completed", **completion_data)
        elif response.status_code >= 400:
            logger.warning("request_completed", **completion_data)
        else:
            logger.info("request_completed", **completion_data)

        return response


def get_client_ip(request: Request) -> str | None:
    """Extract the real client IP from a request.

    Honors X-Forwarded-For and X-Real-IP for proxied requests.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # The first entry is the original client
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host

    return None

"""Request tracing middleware."""

import uuid

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from rbac_admin.core.auth.backend import decode_token


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Middleware that adds a unique request ID to each request.

    The request ID is added to:
    - request.state.request_id (and ``trace_id`` for the error handlers)
    - Response header X-Request-ID
    - Structlog context

    When a valid bearer token is present its user id is also placed on
    ``request.state.user_id`` for request logging.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        request.state.request_id = request_id
        request.state.trace_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.startswith("Bearer "):
            token_data = decode_token(auth_header.split(" ", 1)[1])
            if token_data:
                request.state.user_id = token_data.user_id

        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id", "user_id")

        response.headers["X-Request-ID"] = request_id
        return response

"""RFC 7807 Problem Details exception handlers.

Every error response carries the problem fields plus ``error_code`` so
the dashboard can branch on it without parsing ``type``. Extra details
raised with an AppException (``required_permissions``, ``cycle``,
``problems``) are merged into the top level of the body.

See: https://tools.ietf.org/html/rfc7807
"""

from typing import TYPE_CHECKING, Any, cast

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from rbac_admin.config import settings
from rbac_admin.core.errors.exceptions import AppException


if TYPE_CHECKING:
    from starlette.types import ExceptionHandler


logger = structlog.get_logger()


class FieldError(BaseModel):
    """A single invalid field in a request body or query."""

    field: str
    message: str
    type: str | None = None


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details response schema.

    Attributes:
        type: URI of the error page for ``error_code``
        title: ``error_code`` in title case
        status: HTTP status code
        detail: Message for this occurrence
        error_code: Machine-readable code
        instance: Request path
        errors: Field-level errors for validation failures
        trace_id: Request ID of the failing request
    """

    type: str
    title: str
    status: int
    detail: str
    error_code: str
    instance: str | None = None
    errors: list[FieldError] | None = None
    trace_id: str | None = None

    model_config = {"extra": "allow"}


def _problem(
    request: Request,
    status_code: int,
    error_code: str,
    detail: str,
    title: str | None = None,
    errors: list[FieldError] | None = None,
    extra: dict[str, Any] | None = None,
) -> JSONResponse:
    content = ProblemDetail(
        type=f"{settings.api_docs_base_url}/errors/{error_code}",
        title=title or error_code.replace("_", " ").title(),
        status=status_code,
        detail=detail,
        error_code=error_code,
        instance=str(request.url.path),
        errors=errors,
        trace_id=getattr(request.state, "trace_id", None),
    ).model_dump(exclude_none=True)

    for key, value in (extra or {}).items():
        content.setdefault(key, value)

    return JSONResponse(status_code=status_code, content=content)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Convert AppException subclasses to Problem Details responses."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "app_exception",
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        path=str(request.url.path),
        details=exc.details,
    )

    # Validation errors carry their field list under details["errors"]
    details = dict(exc.details)
    raw_errors = details.pop("errors", None)
    errors = [FieldError(**e) for e in raw_errors] if raw_errors else None

    return _problem(
        request,
        exc.status_code,
        exc.error_code,
        exc.message,
        errors=errors,
        extra=details,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Convert request validation errors to Problem Details with field errors."""
    errors: list[FieldError] = []

    for error in exc.errors():
        # Skip "body" prefix in field path
        field_parts = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors.append(
            FieldError(
                field=".".join(field_parts) if field_parts else "unknown",
                message=error.get("msg", "Invalid value"),
                type=error.get("type"),
            )
        )

    logger.warning(
        "validation_error",
        path=str(request.url.path),
        error_count=len(errors),
    )

    return _problem(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "validation_error",
        "Request validation failed",
        errors=errors,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected exceptions and return a generic 500 error."""
    logger.exception(
        "unhandled_exception",
        path=str(request.url.path),
        error_type=type(exc).__name__,
    )

    return _problem(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        "An unexpected error occurred",
        title="Internal Server Error",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(
        AppException, cast("ExceptionHandler", app_exception_handler)
    )
    app.add_exception_handler(
        RequestValidationError, cast("ExceptionHandler", validation_exception_handler)
    )
    app.add_exception_handler(Exception, generic_exception_handler)

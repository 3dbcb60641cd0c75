"""Error handling module with RFC 7807 Problem Details."""

from rbac_admin.core.errors.exceptions import (
    AppException,
    CatalogIntegrityError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    UserInactiveError,
    UserNotFoundError,
    ValidationError,
)
from rbac_admin.core.errors.handlers import (
    FieldError,
    ProblemDetail,
    register_exception_handlers,
)


__all__ = [
    "AppException",
    "CatalogIntegrityError",
    "ConflictError",
    "FieldError",
    "ForbiddenError",
    "NotFoundError",
    "ProblemDetail",
    "UnauthorizedError",
    "UserInactiveError",
    "UserNotFoundError",
    "ValidationError",
    "register_exception_handlers",
]

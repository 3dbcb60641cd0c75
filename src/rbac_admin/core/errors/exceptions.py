"""Domain exceptions for the application.

These exceptions represent business-logic errors and are automatically
converted to RFC 7807 Problem Details responses by the exception handlers.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for clients
        status_code: HTTP status code for the response
        details: Additional error details
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Raised when a requested resource is not found.

    Example:
        raise NotFoundError("Group not found", resource="group", resource_id=str(group_id))
    """

    message = "Resource not found"
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message=message, details=details, **kwargs)


class ConflictError(AppException):
    """Raised when there's a conflict with existing data.

    Example:
        raise ConflictError("Permission code already exists", details={"code": code})
    """

    message = "Resource conflict"
    error_code = "conflict"
    status_code = 409


class ValidationError(AppException):
    """Raised when request data fails business validation.

    Example:
        raise ValidationError(
            "Unknown permission codes",
            errors=[{"field": "permission_codes", "message": "Unknown code: x.y"}]
        )
    """

    message = "Validation error"
    error_code = "validation_error"
    status_code = 422

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if errors:
            details["errors"] = errors
        super().__init__(message=message, details=details, **kwargs)


class UnauthorizedError(AppException):
    """Raised when authentication is required but not provided or invalid."""

    message = "Authentication required"
    error_code = "unauthorized"
    status_code = 401


class ForbiddenError(AppException):
    """Raised when user lacks permission to access a resource.

    Example:
        raise ForbiddenError(
            "Insufficient permissions",
            details={"required_permissions": ["users.manage"]}
        )
    """

    message = "Access forbidden"
    error_code = "forbidden"
    status_code = 403


# ============================================================
# Access resolution errors
# ============================================================


class UserNotFoundError(NotFoundError):
    """Raised when permissions are resolved for an unknown user id."""

    message = "User not found"
    error_code = "user_not_found"

    def __init__(self, user_id: Any, **kwargs: Any) -> None:
        super().__init__(resource="user", resource_id=str(user_id), **kwargs)
        self.user_id = user_id


class UserInactiveError(ForbiddenError):
    """Raised when permissions are resolved for a deactivated user.

    Callers must deny the session rather than fall back to an
    empty permission set.
    """

    message = "User account is deactivated"
    error_code = "user_inactive"

    def __init__(self, user_id: Any, **kwargs: Any) -> None:
        details = kwargs.pop("details", {})
        details["user_id"] = str(user_id)
        super().__init__(details=details, **kwargs)
        self.user_id = user_id


class CatalogIntegrityError(AppException):
    """Raised when catalog data violates a structural invariant at read time.

    Example:
        raise CatalogIntegrityError(
            "Menu catalog contains a parent cycle",
            details={"cycle": ["m1", "m2", "m1"]},
        )
    """

    message = "Catalog integrity violated"
    error_code = "catalog_integrity"
    status_code = 500

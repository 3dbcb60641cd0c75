"""Permission decorators for route protection.

Decorated route handlers must take ``current_user`` and ``db`` keyword
parameters; the decorator reads both from the call.
"""

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar, cast

import structlog

from rbac_admin.core.errors import ForbiddenError
from rbac_admin.core.permissions.checker import PermissionChecker


if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from rbac_admin.modules.users.models import User


logger = structlog.get_logger()

P = ParamSpec("P")
R = TypeVar("R")


def _get_user_and_db(
    kwargs: dict[str, Any],
) -> tuple["User | None", "AsyncSession | None"]:
    user = cast("User | None", kwargs.get("current_user"))
    db = cast("AsyncSession | None", kwargs.get("db"))
    return user, db


def _require(
    codes: list[str],
    require_all: bool,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            user, db = _get_user_and_db(kwargs)

            if not user:
                raise ForbiddenError(
                    "Authentication required",
                    error_code="auth_required",
                )

            if not db:
                raise ForbiddenError(
                    "Permission check failed",
                    error_code="permission_check_failed",
                )

            checker = PermissionChecker(db)
            if require_all:
                allowed = await checker.has_all_permissions(user.id, codes)
            else:
                allowed = await checker.has_any_permission(user.id, codes)

            if not allowed:
                logger.warning(
                    "permission_denied",
                    user_id=str(user.id),
                    required=codes,
                    require_all=require_all,
                    handler=func.__name__,
                )
                needed = "all of" if require_all else "one of"
                raise ForbiddenError(
                    f"Missing required permission. Need {needed}: {', '.join(codes)}",
                    error_code="permission_denied",
                    details={"required_permissions": codes},
                )

            return await func(*args, **kwargs)

        return wrapper

    return decorator


def require_permission(
    code: str,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator that requires a specific permission code.

    Usage:
        @router.delete("/{group_id}")
        @require_permission("groups.manage")
        async def delete_group(group_id: UUID, current_user: CurrentUser, db: DBSession):
            ...

    Raises:
        ForbiddenError: If user lacks the required permission
    """
    return _require([code], require_all=True)


def require_any_permission(
    codes: list[str],
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator that requires any one of the given permission codes."""
    return _require(codes, require_all=False)


def require_all_permissions(
    codes: list[str],
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator that requires every one of the given permission codes."""
    return _require(codes, require_all=True)

"""FastAPI dependencies for authentication and session state.

This module provides dependency injection functions for:
- Extracting and validating JWT tokens
- Getting the current authenticated user
- Establishing the per-request ``SessionState``
"""

from typing import Annotated, Any

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from rbac_admin.api.dependencies import DBSession
from rbac_admin.core.auth.backend import decode_token
from rbac_admin.core.auth.schemas import TokenData
from rbac_admin.core.errors import UnauthorizedError, UserInactiveError
from rbac_admin.core.permissions.repos import AccessRepo
from rbac_admin.core.permissions.session import SessionState


logger = structlog.get_logger()

# HTTP Bearer token security scheme
bearer_scheme = HTTPBearer(auto_error=False)


async def get_token_data(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> TokenData:
    """Extract and validate token data from the Authorization header.

    Raises:
        UnauthorizedError: If token is missing or invalid
    """
    if not credentials:
        raise UnauthorizedError(
            "Missing authentication token",
            error_code="missing_token",
        )

    token_data = decode_token(credentials.credentials)
    if not token_data:
        raise UnauthorizedError(
            "Invalid or expired token",
            error_code="invalid_token",
        )

    if token_data.type != "access":
        raise UnauthorizedError(
            "Invalid token type",
            error_code="invalid_token_type",
        )

    return token_data


async def get_current_user(
    token_data: Annotated[TokenData, Depends(get_token_data)],
    db: DBSession,
) -> Any:  # Returns User, but use Any to avoid circular import
    """Get the currently authenticated user.

    Raises:
        UnauthorizedError: If the token's user no longer exists
        UserInactiveError: If the user is deactivated
    """
    from rbac_admin.modules.users.repos import UserRepository  # noqa: PLC0415

    user = await UserRepository(db).get_by_id(token_data.user_id)

    if not user:
        raise UnauthorizedError(
            "User not found",
            error_code="user_not_found",
        )

    if not user.is_active:
        raise UserInactiveError(user.id)

    structlog.contextvars.bind_contextvars(user_id=str(user.id))
    return user


CurrentUser = Annotated[Any, Depends(get_current_user)]


async def get_session_state(
    current_user: CurrentUser,
    repository: AccessRepo,
) -> SessionState:
    """Establish the session for the authenticated user.

    The state is computed fresh for every request.
    """
    state = SessionState(current_user.id)
    await state.refresh(repository)
    return state


CurrentSession = Annotated[SessionState, Depends(get_session_state)]

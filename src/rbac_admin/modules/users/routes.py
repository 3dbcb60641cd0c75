"""User administration routes.

The signed-in user's own session lives under ``/auth/me``; these
endpoints manage other accounts.
"""

from uuid import UUID

from fastapi import APIRouter, status

from rbac_admin.api.dependencies import DBSession, Pagination
from rbac_admin.core.auth.dependencies import CurrentUser
from rbac_admin.core.permissions.decorators import require_permission
from rbac_admin.modules.users.schemas import (
    UserCreate,
    UserGroupsAssign,
    UserListResponse,
    UserResponse,
    UserUpdate,
)
from rbac_admin.modules.users.services import UserSvc


router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "",
    response_model=UserListResponse,
    summary="List users",
    description="List users ordered by email. Requires users.view.",
)
@require_permission("users.view")
async def list_users(
    service: UserSvc,
    pagination: Pagination,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> UserListResponse:
    users, total = await service.list_users(pagination.offset, pagination.page_size)
    return UserListResponse(
        items=[UserResponse.model_validate(u) for u in users],
        total=total,
        page=pagination.page,
        page_size=pagination.page_size,
    )


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get user by ID",
    description="Get a specific user by their ID. Requires users.view.",
)
@require_permission("users.view")
async def get_user(
    user_id: UUID,
    service: UserSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> UserResponse:
    user = await service.get_user(user_id)
    return UserResponse.model_validate(user)


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
    description="Create a user account. Requires users.manage.",
)
@require_permission("users.manage")
async def create_user(
    data: UserCreate,
    service: UserSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> UserResponse:
    user = await service.create_user(data)
    return UserResponse.model_validate(user)


@router.patch(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update user",
    description="Update a user's display name or active flag. Requires users.manage.",
)
@require_permission("users.manage")
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    service: UserSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> UserResponse:
    user = await service.update_user(user_id, data)
    return UserResponse.model_validate(user)


@router.put(
    "/{user_id}/groups",
    response_model=UserResponse,
    summary="Assign groups",
    description="Replace the groups a user belongs to. Requires users.manage.",
)
@require_permission("users.manage")
async def assign_user_groups(
    user_id: UUID,
    data: UserGroupsAssign,
    service: UserSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> UserResponse:
    user = await service.assign_groups(user_id, data.group_ids)
    return UserResponse.model_validate(user)

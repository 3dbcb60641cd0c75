"""Group API routes."""

from uuid import UUID

from fastapi import APIRouter, status

from rbac_admin.api.dependencies import DBSession
from rbac_admin.core.auth.dependencies import CurrentUser
from rbac_admin.core.permissions.decorators import require_permission
from rbac_admin.modules.groups.schemas import (
    GroupCreate,
    GroupPermissionsAssign,
    GroupResponse,
    GroupUpdate,
)
from rbac_admin.modules.groups.services import GroupSvc


router = APIRouter(prefix="/groups", tags=["groups"])


@router.get(
    "",
    response_model=list[GroupResponse],
    summary="List groups",
    description="List all groups with their permission codes. Requires groups.view.",
)
@require_permission("groups.view")
async def list_groups(
    service: GroupSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> list[GroupResponse]:
    groups = await service.list_groups()
    return [GroupResponse.model_validate(g) for g in groups]


@router.get(
    "/{group_id}",
    response_model=GroupResponse,
    summary="Get group",
    description="Get a group by ID. Requires groups.view.",
)
@require_permission("groups.view")
async def get_group(
    group_id: UUID,
    service: GroupSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> GroupResponse:
    group = await service.get_group(group_id)
    return GroupResponse.model_validate(group)


@router.post(
    "",
    response_model=GroupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create group",
    description="Create a group. Requires groups.manage.",
)
@require_permission("groups.manage")
async def create_group(
    data: GroupCreate,
    service: GroupSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> GroupResponse:
    group = await service.create_group(data)
    return GroupResponse.model_validate(group)


@router.patch(
    "/{group_id}",
    response_model=GroupResponse,
    summary="Update group",
    description="Update a group. Requires groups.manage.",
)
@require_permission("groups.manage")
async def update_group(
    group_id: UUID,
    data: GroupUpdate,
    service: GroupSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> GroupResponse:
    group = await service.update_group(group_id, data)
    return GroupResponse.model_validate(group)


@router.put(
    "/{group_id}/permissions",
    response_model=GroupResponse,
    summary="Assign permissions",
    description="Replace the permissions granted to a group. Requires groups.manage.",
)
@require_permission("groups.manage")
async def assign_group_permissions(
    group_id: UUID,
    data: GroupPermissionsAssign,
    service: GroupSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> GroupResponse:
    group = await service.assign_permissions(group_id, data.permission_codes)
    return GroupResponse.model_validate(group)


@router.delete(
    "/{group_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete group",
    description="Delete a group. Members lose its permissions. Requires groups.manage.",
)
@require_permission("groups.manage")
async def delete_group(
    group_id: UUID,
    service: GroupSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> None:
    await service.delete_group(group_id)

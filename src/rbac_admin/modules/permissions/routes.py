"""Permission API routes."""

from uuid import UUID

from fastapi import APIRouter, status

from rbac_admin.api.dependencies import DBSession
from rbac_admin.core.auth.dependencies import CurrentUser
from rbac_admin.core.permissions.decorators import require_permission
from rbac_admin.modules.permissions.schemas import (
    PermissionCreate,
    PermissionResponse,
    PermissionTreeNode,
    PermissionUpdate,
)
from rbac_admin.modules.permissions.services import PermissionSvc


router = APIRouter(prefix="/permissions", tags=["permissions"])


@router.get(
    "",
    response_model=list[PermissionResponse],
    summary="List permissions",
    description="List all permissions ordered by code. Requires permissions.view.",
)
@require_permission("permissions.view")
async def list_permissions(
    service: PermissionSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> list[PermissionResponse]:
    permissions = await service.list_permissions()
    return [PermissionResponse.model_validate(p) for p in permissions]


@router.get(
    "/tree",
    response_model=list[PermissionTreeNode],
    summary="Permission tree",
    description="Permissions grouped by parent code. Requires permissions.view.",
)
@require_permission("permissions.view")
async def get_permission_tree(
    service: PermissionSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> list[PermissionTreeNode]:
    tree = await service.get_tree()
    return [PermissionTreeNode.from_dict(node) for node in tree]


@router.get(
    "/{permission_id}",
    response_model=PermissionResponse,
    summary="Get permission",
    description="Get a permission by ID. Requires permissions.view.",
)
@require_permission("permissions.view")
async def get_permission(
    permission_id: UUID,
    service: PermissionSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> PermissionResponse:
    permission = await service.get_permission(permission_id)
    return PermissionResponse.model_validate(permission)


@router.post(
    "",
    response_model=PermissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create permission",
    description="Create a permission. Requires permissions.manage.",
)
@require_permission("permissions.manage")
async def create_permission(
    data: PermissionCreate,
    service: PermissionSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> PermissionResponse:
    permission = await service.create_permission(data)
    return PermissionResponse.model_validate(permission)


@router.patch(
    "/{permission_id}",
    response_model=PermissionResponse,
    summary="Update permission",
    description="Update a permission. Requires permissions.manage.",
)
@require_permission("permissions.manage")
async def update_permission(
    permission_id: UUID,
    data: PermissionUpdate,
    service: PermissionSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> PermissionResponse:
    permission = await service.update_permission(permission_id, data)
    return PermissionResponse.model_validate(permission)


@router.delete(
    "/{permission_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete permission",
    description="Delete an unused permission. Requires permissions.manage.",
)
@require_permission("permissions.manage")
async def delete_permission(
    permission_id: UUID,
    service: PermissionSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> None:
    await service.delete_permission(permission_id)

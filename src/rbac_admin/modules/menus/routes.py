"""Menu API routes."""

from uuid import UUID

from fastapi import APIRouter, status

from rbac_admin.api.dependencies import DBSession
from rbac_admin.core.auth.dependencies import CurrentUser
from rbac_admin.core.auth.schemas import MenuNodeResponse
from rbac_admin.core.permissions.decorators import require_permission
from rbac_admin.modules.menus.schemas import (
    MenuCreate,
    MenuPermissionBind,
    MenuRename,
    MenuResponse,
    MenuUpdate,
)
from rbac_admin.modules.menus.services import MenuSvc


router = APIRouter(prefix="/menus", tags=["menus"])


@router.get(
    "",
    response_model=list[MenuResponse],
    summary="List menus",
    description="List all menu entries in sort order. Requires menus.view.",
)
@require_permission("menus.view")
async def list_menus(
    service: MenuSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> list[MenuResponse]:
    menus = await service.list_menus()
    return [MenuResponse.model_validate(m) for m in menus]


@router.get(
    "/tree",
    response_model=list[MenuNodeResponse],
    summary="Menu tree",
    description="The full menu catalog as a tree, unfiltered. Requires menus.view.",
)
@require_permission("menus.view")
async def get_menu_tree(
    service: MenuSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> list[MenuNodeResponse]:
    tree = await service.get_tree()
    return [MenuNodeResponse.from_node(node) for node in tree]


@router.get(
    "/{menu_id}",
    response_model=MenuResponse,
    summary="Get menu",
    description="Get a menu entry by ID. Requires menus.view.",
)
@require_permission("menus.view")
async def get_menu(
    menu_id: UUID,
    service: MenuSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> MenuResponse:
    menu = await service.get_menu(menu_id)
    return MenuResponse.model_validate(menu)


@router.post(
    "",
    response_model=MenuResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create menu",
    description="Create a menu entry. Requires menus.manage.",
)
@require_permission("menus.manage")
async def create_menu(
    data: MenuCreate,
    service: MenuSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> MenuResponse:
    menu = await service.create_menu(data)
    return MenuResponse.model_validate(menu)


@router.patch(
    "/{menu_id}",
    response_model=MenuResponse,
    summary="Update menu",
    description="Update a menu entry. Requires menus.manage.",
)
@require_permission("menus.manage")
async def update_menu(
    menu_id: UUID,
    data: MenuUpdate,
    service: MenuSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> MenuResponse:
    menu = await service.update_menu(menu_id, data)
    return MenuResponse.model_validate(menu)


@router.post(
    "/{menu_id}/rename",
    response_model=MenuResponse,
    summary="Rename menu",
    description="Change a menu entry's display name. Requires menus.manage.",
)
@require_permission("menus.manage")
async def rename_menu(
    menu_id: UUID,
    data: MenuRename,
    service: MenuSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> MenuResponse:
    menu = await service.rename_menu(menu_id, data.name)
    return MenuResponse.model_validate(menu)


@router.put(
    "/{menu_id}/permission",
    response_model=MenuResponse,
    summary="Rebind menu permission",
    description="Gate a menu entry with another permission. Requires menus.manage.",
)
@require_permission("menus.manage")
async def rebind_menu_permission(
    menu_id: UUID,
    data: MenuPermissionBind,
    service: MenuSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> MenuResponse:
    menu = await service.rebind_permission(menu_id, data.permission_code)
    return MenuResponse.model_validate(menu)


@router.delete(
    "/{menu_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete menu",
    description="Delete a menu entry without children. Requires menus.manage.",
)
@require_permission("menus.manage")
async def delete_menu(
    menu_id: UUID,
    service: MenuSvc,
    current_user: CurrentUser,  # noqa: ARG001 - required for auth
    db: DBSession,  # noqa: ARG001 - required for permission check
) -> None:
    await service.delete_menu(menu_id)

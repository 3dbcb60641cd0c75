"""Catalog seeding from a YAML file.

A seed file lists permissions, groups, menus and users. Menus name their
parent by path and users name their groups by code, so a file can be
written by hand and applied to an empty or an existing database alike.
"""

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

import structlog
import yaml
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_admin.core.auth.backend import hash_password
from rbac_admin.core.errors import CatalogIntegrityError
from rbac_admin.core.permissions.catalog import (
    PermissionCatalog,
    PermissionRecord,
    find_cycle,
)
from rbac_admin.core.permissions.models import Group, Permission
from rbac_admin.modules.groups.repos import GroupRepository
from rbac_admin.modules.menus.models import Menu
from rbac_admin.modules.menus.repos import MenuRepository
from rbac_admin.modules.permissions.repos import PermissionRepository
from rbac_admin.modules.users.models import User
from rbac_admin.modules.users.repos import UserRepository


logger = structlog.get_logger()


# ============================================================
# Seed file schemas
# ============================================================


class SeedPermission(BaseModel):
    code: str
    name: str
    description: str | None = None
    parent_code: str | None = None
    is_active: bool = True


class SeedGroup(BaseModel):
    code: str
    name: str
    description: str | None = None
    is_active: bool = True
    permissions: list[str] = Field(default_factory=list)


class SeedMenu(BaseModel):
    name: str
    path: str
    permission_code: str
    icon: str | None = None
    order: int = 0
    parent_path: str | None = None
    is_active: bool = True


class SeedUser(BaseModel):
    email: EmailStr
    display_name: str
    password: str | None = None
    is_active: bool = True
    groups: list[str] = Field(default_factory=list)


class SeedCatalog(BaseModel):
    """Contents of a seed file."""

    permissions: list[SeedPermission] = Field(default_factory=list)
    groups: list[SeedGroup] = Field(default_factory=list)
    menus: list[SeedMenu] = Field(default_factory=list)
    users: list[SeedUser] = Field(default_factory=list)


def load_seed_file(path: Path) -> SeedCatalog:
    """Read and parse a seed file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is not a valid seed catalog
    """
    if not path.exists():
        raise FileNotFoundError(f"Seed file '{path}' not found")

    with path.open() as f:
        data = yaml.safe_load(f) or {}

    try:
        return SeedCatalog(**data)
    except Exception as e:
        raise ValueError(f"Invalid seed file: {e}") from e


# ============================================================
# Consistency check
# ============================================================


def _duplicates(values: list[str]) -> list[str]:
    return sorted(value for value, count in Counter(values).items() if count > 1)


def check_seed(catalog: SeedCatalog) -> list[str]:
    """List every consistency problem in a seed catalog.

    Needs no database: permission parent chains, group grants, menu
    permission codes and parents, and user group references are checked
    against the file itself.
    """
    problems: list[str] = []

    for code in _duplicates([p.code for p in catalog.permissions]):
        problems.append(f"Duplicate permission code: {code}")
    for code in _duplicates([g.code for g in catalog.groups]):
        problems.append(f"Duplicate group code: {code}")
    for path in _duplicates([m.path for m in catalog.menus]):
        problems.append(f"Duplicate menu path: {path}")
    for email in _duplicates([str(u.email) for u in catalog.users]):
        problems.append(f"Duplicate user email: {email}")

    permissions = PermissionCatalog(
        PermissionRecord(
            code=p.code,
            name=p.name,
            parent_code=p.parent_code,
            is_active=p.is_active,
        )
        for p in catalog.permissions
    )
    for problem in permissions.problems():
        problems.append(f"Permission {problem['code']}: {problem['message']}")

    for group in catalog.groups:
        for code in group.permissions:
            if code not in permissions:
                problems.append(f"Group {group.code}: unknown permission {code}")

    paths = {menu.path for menu in catalog.menus}
    for menu in catalog.menus:
        permission = permissions.get(menu.permission_code)
        if permission is None:
            problems.append(f"Menu {menu.path}: unknown permission {menu.permission_code}")
        elif not permission.is_active:
            problems.append(f"Menu {menu.path}: inactive permission {menu.permission_code}")
        if menu.parent_path is not None and menu.parent_path not in paths:
            problems.append(f"Menu {menu.path}: unknown parent {menu.parent_path}")

    cycle = find_cycle({menu.path: menu.parent_path for menu in catalog.menus})
    if cycle:
        problems.append("Menu parents form a cycle: " + " -> ".join(cycle))

    group_codes = {group.code for group in catalog.groups}
    for user in catalog.users:
        for code in user.groups:
            if code not in group_codes:
                problems.append(f"User {user.email}: unknown group {code}")

    return problems


# ============================================================
# Applying a seed
# ============================================================


@dataclass
class SeedReport:
    """Rows created and updated per kind."""

    created: Counter[str] = field(default_factory=Counter)
    updated: Counter[str] = field(default_factory=Counter)


async def apply_seed(session: AsyncSession, catalog: SeedCatalog) -> SeedReport:
    """Create or update every row in ``catalog``.

    Rows are matched by permission code, group code, menu path and user
    email. Existing users keep their password. The caller commits.

    Raises:
        CatalogIntegrityError: If ``check_seed`` finds problems; nothing
            is written
    """
    problems = check_seed(catalog)
    if problems:
        raise CatalogIntegrityError(
            "Seed catalog is inconsistent",
            details={"problems": problems},
        )

    report = SeedReport()
    permission_repo = PermissionRepository(session)
    group_repo = GroupRepository(session)
    menu_repo = MenuRepository(session)
    user_repo = UserRepository(session)

    permissions: dict[str, Permission] = {}
    for item in catalog.permissions:
        permission = await permission_repo.get_by_code(item.code)
        if permission is None:
            permission = await permission_repo.create(Permission(**item.model_dump()))
            report.created["permissions"] += 1
        else:
            for key, value in item.model_dump(exclude={"code"}).items():
                setattr(permission, key, value)
            await permission_repo.update(permission)
            report.updated["permissions"] += 1
        permissions[item.code] = permission

    groups: dict[str, Group] = {}
    for item in catalog.groups:
        granted = [permissions[code] for code in item.permissions]
        group = await group_repo.get_by_code(item.code)
        if group is None:
            group = await group_repo.create(
                Group(**item.model_dump(exclude={"permissions"}), permissions=granted)
            )
            report.created["groups"] += 1
        else:
            for key, value in item.model_dump(exclude={"code", "permissions"}).items():
                setattr(group, key, value)
            group.permissions = granted
            await group_repo.update(group)
            report.updated["groups"] += 1
        groups[item.code] = group

    # Parents are linked in a second pass so the file order is free
    menus: dict[str, Menu] = {}
    for item in catalog.menus:
        values = item.model_dump(exclude={"permission_code", "parent_path"})
        menu = await menu_repo.get_by_path(item.path)
        if menu is None:
            menu = Menu(**values, permission=permissions[item.permission_code])
            menu = await menu_repo.create(menu)
            report.created["menus"] += 1
        else:
            for key, value in values.items():
                setattr(menu, key, value)
            menu.permission = permissions[item.permission_code]
            report.updated["menus"] += 1
        menus[item.path] = menu

    for item in catalog.menus:
        menu = menus[item.path]
        menu.parent_id = menus[item.parent_path].id if item.parent_path else None
        await menu_repo.update(menu)

    for item in catalog.users:
        members = [groups[code] for code in item.groups]
        user = await user_repo.get_by_email(str(item.email))
        if user is None:
            await user_repo.create(
                User(
                    email=str(item.email),
                    display_name=item.display_name,
                    password_hash=hash_password(item.password) if item.password else None,
                    is_active=item.is_active,
                    groups=members,
                )
            )
            report.created["users"] += 1
        else:
            user.display_name = item.display_name
            user.is_active = item.is_active
            user.groups = members
            await user_repo.update(user)
            report.updated["users"] += 1

    logger.info(
        "seed_applied",
        created=dict(report.created),
        updated=dict(report.updated),
    )
    return report

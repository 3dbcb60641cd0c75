"""Authentication and session schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from rbac_admin.core.permissions.menu import MenuNode
from rbac_admin.core.permissions.session import SessionView


class TokenData(BaseModel):
    """Data extracted from a JWT access token.

    Attributes:
        user_id: The user's UUID (``sub`` claim)
        exp: Token expiration time
        type: Token type
        jti: Unique token id
    """

    user_id: UUID
    exp: datetime
    type: str = "access"
    jti: str | None = None


# ============================================================
# Session Schemas
# ============================================================


class CamelModel(BaseModel):
    """Base for payloads the dashboard reads with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserProfile(CamelModel):
    """Public profile of the session user."""

    id: UUID
    email: str
    display_name: str
    is_active: bool


class MenuNodeResponse(CamelModel):
    """A menu entry with its child entries."""

    id: UUID
    name: str
    path: str
    icon: str | None = None
    order: int
    permission_code: str
    is_active: bool = True
    children: list["MenuNodeResponse"] = []

    @classmethod
    def from_node(cls, node: MenuNode) -> "MenuNodeResponse":
        return cls(
            id=node.id,
            name=node.name,
            path=node.path,
            icon=node.icon,
            order=node.order,
            permission_code=node.permission_code,
            is_active=node.is_active,
            children=[cls.from_node(child) for child in node.children],
        )


class SessionResponse(CamelModel):
    """The user, their effective permissions and their menu tree."""

    user: UserProfile
    effective_permissions: list[str]
    menu_tree: list[MenuNodeResponse]

    @classmethod
    def from_view(cls, view: SessionView) -> "SessionResponse":
        return cls(
            user=UserProfile(
                id=view.user.id,
                email=view.user.email,
                display_name=view.user.display_name,
                is_active=view.user.is_active,
            ),
            effective_permissions=list(view.effective_permissions),
            menu_tree=[MenuNodeResponse.from_node(node) for node in view.menu_tree],
        )


class ProjectRoleTable(BaseModel):
    """Allowed actions per project role."""

    roles: dict[str, list[str]]

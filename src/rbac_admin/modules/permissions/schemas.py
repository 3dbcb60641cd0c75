"""Pydantic schemas for permission operations."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from rbac_admin.core.constants import (
    MAX_CODE_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_NAME_LENGTH,
)


# Dotted lowercase codes such as "users.view" or "collab.projects.view"
CODE_PATTERN = r"^[a-z][a-z0-9_]*(\.[a-z][a-z0-9_]*)*$"


class PermissionBase(BaseModel):
    """Base schema for permission data."""

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    parent_code: str | None = Field(None, max_length=MAX_CODE_LENGTH)
    is_active: bool = True


class PermissionCreate(PermissionBase):
    """Schema for creating a permission."""

    code: str = Field(
        ..., min_length=1, max_length=MAX_CODE_LENGTH, pattern=CODE_PATTERN
    )


class PermissionUpdate(BaseModel):
    """Schema for updating a permission.

    The code is immutable. Send ``parent_code: null`` to detach a
    permission from its parent.
    """

    name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    parent_code: str | None = Field(None, max_length=MAX_CODE_LENGTH)
    is_active: bool | None = None


class PermissionResponse(PermissionBase):
    """Schema for permission response data."""

    id: UUID
    code: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PermissionTreeNode(BaseModel):
    """A permission with the permissions grouped under it."""

    code: str
    name: str
    description: str | None = None
    is_active: bool
    children: list["PermissionTreeNode"] = []

    @classmethod
    def from_dict(cls, node: dict[str, Any]) -> "PermissionTreeNode":
        return cls(
            code=node["code"],
            name=node["name"],
            description=node["description"],
            is_active=node["is_active"],
            children=[cls.from_dict(child) for child in node["children"]],
        )

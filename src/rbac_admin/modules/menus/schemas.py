"""Pydantic schemas for menu operations."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from rbac_admin.core.constants import (
    MAX_CODE_LENGTH,
    MAX_ICON_LENGTH,
    MAX_NAME_LENGTH,
    MAX_PATH_LENGTH,
)


class MenuBase(BaseModel):
    """Base schema for menu data."""

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    path: str = Field(..., min_length=1, max_length=MAX_PATH_LENGTH)
    icon: str | None = Field(None, max_length=MAX_ICON_LENGTH)
    order: int = 0
    parent_id: UUID | None = None
    is_active: bool = True


class MenuCreate(MenuBase):
    """Schema for creating a menu entry."""

    permission_code: str = Field(..., min_length=1, max_length=MAX_CODE_LENGTH)


class MenuUpdate(BaseModel):
    """Schema for updating a menu entry.

    Send ``parent_id: null`` to move an entry to the top level.
    """

    name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    path: str | None = Field(None, min_length=1, max_length=MAX_PATH_LENGTH)
    icon: str | None = Field(None, max_length=MAX_ICON_LENGTH)
    order: int | None = None
    parent_id: UUID | None = None
    is_active: bool | None = None
    permission_code: str | None = Field(None, min_length=1, max_length=MAX_CODE_LENGTH)


class MenuRename(BaseModel):
    """Schema for renaming a menu entry."""

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)


class MenuPermissionBind(BaseModel):
    """Schema for rebinding the permission that gates a menu entry."""

    permission_code: str = Field(..., min_length=1, max_length=MAX_CODE_LENGTH)


class MenuResponse(MenuBase):
    """Schema for menu response data."""

    id: UUID
    permission_code: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

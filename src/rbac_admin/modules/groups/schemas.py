"""Pydantic schemas for group operations."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rbac_admin.core.constants import (
    MAX_CODE_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_NAME_LENGTH,
)


class GroupBase(BaseModel):
    """Base schema for group data."""

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    is_active: bool = True


class GroupCreate(GroupBase):
    """Schema for creating a group, optionally with its permissions."""

    code: str = Field(..., min_length=1, max_length=MAX_CODE_LENGTH)
    permission_codes: list[str] = []


class GroupUpdate(BaseModel):
    """Schema for updating a group."""

    name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    is_active: bool | None = None


class GroupPermissionsAssign(BaseModel):
    """Replace the set of permissions granted to a group."""

    permission_codes: list[str]


class GroupResponse(GroupBase):
    """Schema for group response data."""

    id: UUID
    code: str
    permission_codes: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("permission_codes", mode="before")
    @classmethod
    def sort_codes(cls, v: Any) -> list[str]:
        """ORM groups expose their codes as a set."""
        return sorted(v)

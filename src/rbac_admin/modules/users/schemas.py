"""Pydantic schemas for user operations."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from rbac_admin.core.constants import (
    MAX_NAME_LENGTH,
    MAX_PASSWORD_LENGTH,
    MIN_PASSWORD_LENGTH,
)


class UserBase(BaseModel):
    """Base schema for user data."""

    email: EmailStr
    display_name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)


class UserCreate(UserBase):
    """Schema for creating a user."""

    password: str = Field(
        ..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )
    is_active: bool = True
    group_ids: list[UUID] = []


class UserUpdate(BaseModel):
    """Schema for updating user data."""

    display_name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    is_active: bool | None = None


class UserGroupsAssign(BaseModel):
    """Replace the groups a user belongs to."""

    group_ids: list[UUID]


class UserResponse(UserBase):
    """Schema for user response data."""

    id: UUID
    is_active: bool
    group_ids: list[UUID]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("group_ids", mode="before")
    @classmethod
    def sort_ids(cls, v: Any) -> list[UUID]:
        return sorted(v, key=str)


class UserListResponse(BaseModel):
    """Schema for listing users."""

    items: list[UserResponse]
    total: int
    page: int
    page_size: int

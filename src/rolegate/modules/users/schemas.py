"""Pydantic schemas for user operations."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rolegate.core.permissions.schemas import RoleSummary


# ============================================================
# User Schemas
# ============================================================


class UserResponse(BaseModel):
    """Schema for user response data, with directly assigned roles."""

    id: UUID
    email: str
    name: str | None = None
    email_verified: bool
    created_at: datetime
    roles: list[RoleSummary] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class UserListResponse(BaseModel):
    """Schema for listing users."""

    items: list[UserResponse]
    total: int
    page: int
    page_size: int


# ============================================================
# Role Assignment Schemas
# ============================================================


class RoleAssignmentCreate(BaseModel):
    """Schema for assigning a role to a user."""

    role_id: UUID


# ============================================================
# Access Schemas
# ============================================================


class AccessResponse(BaseModel):
    """A user's direct roles and effective permissions.

    The ``can_manage_*`` flags tell a dashboard which admin sections to
    show.
    """

    user_id: UUID
    roles: list[RoleSummary]
    permissions: list[str]
    can_manage_users: bool
    can_manage_roles: bool
    can_manage_permissions: bool


class AccessCheckRequest(BaseModel):
    """Schema for checking permission codes against the caller.

    ``mode="all"`` requires every code, ``mode="any"`` requires one. An
    empty list is allowed in both modes.
    """

    permissions: list[str] = Field(default_factory=list)
    mode: Literal["all", "any"] = "all"

    @field_validator("permissions")
    @classmethod
    def strip_codes(cls, v: list[str]) -> list[str]:
        """Strip whitespace from codes and reject blank ones."""
        codes = [code.strip() for code in v]
        if any(not code for code in codes):
            raise ValueError("Permission codes must not be empty")
        return codes


class AccessCheckResponse(BaseModel):
    """Result of an access check."""

    allowed: bool
    mode: Literal["all", "any"]
    permissions: list[str]

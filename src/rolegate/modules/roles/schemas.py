"""Pydantic schemas for role operations."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from rolegate.core.constants import MAX_DESCRIPTION_LENGTH, MAX_ROLE_NAME_LENGTH
from rolegate.core.permissions.models import Role
from rolegate.core.permissions.schemas import PermissionSummary, RoleSummary


class RoleCreate(BaseModel):
    """Schema for creating a role."""

    name: str = Field(..., min_length=1, max_length=MAX_ROLE_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    parent_role_id: UUID | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Strip whitespace and reject a blank name."""
        v = v.strip()
        if not v:
            raise ValueError("Role name must not be empty")
        return v


class RoleUpdate(BaseModel):
    """Schema for partially updating a role.

    Only fields present in the request are applied. Sending
    ``parent_role_id: null`` detaches the role from its parent.
    """

    name: str | None = Field(None, min_length=1, max_length=MAX_ROLE_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    parent_role_id: UUID | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        """Strip whitespace and reject a blank name."""
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Role name must not be empty")
        return v


class RoleResponse(BaseModel):
    """Schema for role response data."""

    id: UUID
    name: str
    description: str | None = None
    parent_role: RoleSummary | None = None
    permissions: list[PermissionSummary]
    user_count: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_role(cls, role: Role, user_count: int) -> "RoleResponse":
        """Build a response from a loaded role and its assignment count."""
        return cls(
            id=role.id,
            name=role.name,
            description=role.description,
            parent_role=RoleSummary.model_validate(role.parent_role) if role.parent_role else None,
            permissions=[PermissionSummary.model_validate(p) for p in role.permissions],
            user_count=user_count,
            created_at=role.created_at,
            updated_at=role.updated_at,
        )

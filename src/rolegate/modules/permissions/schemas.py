"""Pydantic schemas for permission operations."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rolegate.core.constants import MAX_DESCRIPTION_LENGTH, MAX_PERMISSION_CODE_LENGTH
from rolegate.core.permissions.schemas import RoleSummary


class PermissionCreate(BaseModel):
    """Schema for creating a permission."""

    code: str = Field(..., min_length=1, max_length=MAX_PERMISSION_CODE_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)

    @field_validator("code")
    @classmethod
    def strip_code(cls, v: str) -> str:
        """Strip whitespace and reject a blank code."""
        v = v.strip()
        if not v:
            raise ValueError("Permission code must not be empty")
        return v


class PermissionResponse(BaseModel):
    """Schema for permission response data."""

    id: UUID
    code: str
    description: str | None = None
    roles: list[RoleSummary]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

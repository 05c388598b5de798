"""Typed records exchanged between the permission store and the engine.

The store converts database rows into these immutable records before the
resolver and evaluator see them, so the engine never works with loosely
typed query results. Validation runs at construction time.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _require_text(value: str, label: str) -> str:
    """Reject a blank string field, returning it unchanged otherwise.

    Records mirror stored values exactly; a code with stray whitespace
    must not start matching a different code.
    """
    if not value.strip():
        raise ValueError(f"{label} must not be empty")
    return value


class RoleRecord(BaseModel):
    """A role as seen by the engine, without its grants.

    ``parent_role_id`` may point back at the role itself or at one of its
    descendants; the store does not guarantee an acyclic hierarchy.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: UUID
    name: str
    description: str | None = None
    parent_role_id: UUID | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate the role name is non-empty."""
        return _require_text(v, "Role name")


class RoleNode(RoleRecord):
    """A role together with the codes granted directly to it."""

    permission_codes: frozenset[str] = Field(default_factory=frozenset)

    @field_validator("permission_codes")
    @classmethod
    def validate_permission_codes(cls, v: frozenset[str]) -> frozenset[str]:
        """Validate every directly granted code is non-empty."""
        return frozenset(_require_text(code, "Permission code") for code in v)


class UserRoleRecord(BaseModel):
    """A direct user-role assignment."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    user_id: UUID
    role_id: UUID
    assigned_by_id: UUID | None = None
    assigned_at: datetime


# ============================================================
# Summaries embedded in API responses
# ============================================================


class RoleSummary(BaseModel):
    """Minimal role reference used inside other responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str


class PermissionSummary(BaseModel):
    """Minimal permission reference used inside other responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    code: str
    description: str | None = None

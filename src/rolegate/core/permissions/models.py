"""Permission system database models.

This module defines the RBAC (Role-Based Access Control) models:
- Permission: A grantable capability identified by a stable code
- Role: A named set of permissions that may inherit from one parent role
- RolePermission: Junction table linking roles to permissions
- UserRole: Junction table linking users to roles, with assignment audit
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rolegate.core.constants import (
    MAX_DESCRIPTION_LENGTH,
    MAX_PERMISSION_CODE_LENGTH,
    MAX_ROLE_NAME_LENGTH,
)
from rolegate.core.database.base import Base, TimestampMixin, UUIDMixin


class Permission(Base, UUIDMixin, TimestampMixin):
    """Permission model representing a single grantable capability.

    Attributes:
        code: Stable, unique key used everywhere outside storage
            (e.g., "manage_users", "view_dashboard")
        description: Human-readable description of the permission
    """

    __tablename__ = "permissions"

    code: Mapped[str] = mapped_column(
        String(MAX_PERMISSION_CODE_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )

    # Relationships (grants are written through RolePermission)
    roles: Mapped[list["Role"]] = relationship(
        "Role",
        secondary="role_permissions",
        viewonly=True,
        order_by="Role.name",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Permission({self.code})>"


class Role(Base, UUIDMixin, TimestampMixin):
    """Role model representing a named set of permissions.

    A role may reference one parent role. Its effective grants are its
    own permissions plus everything granted along the parent chain. The
    database does not prevent a chain from looping back on itself; the
    hierarchy resolver tolerates that.

    A role must not be deleted while any user is still assigned to it;
    the user_roles foreign key restricts the delete.
    Deleting a parent detaches its children (their parent becomes NULL).

    Attributes:
        name: Unique role name (e.g., "admin", "moderator", "user")
        description: Human-readable description of the role
        parent_role_id: Optional parent this role inherits from
    """

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(
        String(MAX_ROLE_NAME_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )
    parent_role_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("roles.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Relationships
    parent_role: Mapped["Role | None"] = relationship(
        "Role",
        remote_side="Role.id",
        lazy="selectin",
    )
    permissions: Mapped[list["Permission"]] = relationship(
        "Permission",
        secondary="role_permissions",
        viewonly=True,
        order_by="Permission.code",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name={self.name}, parent_role_id={self.parent_role_id})>"


class RolePermission(Base):
    """Junction table granting a permission to a role.

    Unique per (role, permission) pair.
    """

    __tablename__ = "role_permissions"
    __table_args__ = (
        UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),
    )

    role_id: Mapped[UUID] = mapped_column(
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    permission_id: Mapped[UUID] = mapped_column(
        ForeignKey("permissions.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<RolePermission(role_id={self.role_id}, permission_id={self.permission_id})>"


class UserRole(Base):
    """Junction table linking users to roles.

    A user can hold several roles; their effective permissions are the
    union of what each role resolves to. ``assigned_by_id`` and
    ``assigned_at`` form an audit trail and are never consulted when
    resolving permissions.
    """

    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role_id", name="uq_user_role"),)

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    role_id: Mapped[UUID] = mapped_column(
        ForeignKey("roles.id", ondelete="RESTRICT"),
        primary_key=True,
        index=True,
    )
    assigned_by_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<UserRole(user_id={self.user_id}, role_id={self.role_id})>"

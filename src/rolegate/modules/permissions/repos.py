"""Permission repository for database operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import select

from rolegate.api.dependencies import DBSession
from rolegate.core.permissions.models import Permission, RolePermission


class PermissionRepository:
    """Repository for Permission and RolePermission database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, permission: Permission) -> Permission:
        """Create a new permission.

        Args:
            permission: Permission instance to create

        Returns:
            The created permission with ID populated
        """
        self.session.add(permission)
        await self.session.flush()
        await self.session.refresh(permission)
        return permission

    async def get_by_id(self, permission_id: UUID) -> Permission | None:
        """Get a permission by ID.

        Args:
            permission_id: The permission's UUID

        Returns:
            Permission if found, None otherwise
        """
        result = await self.session.execute(
            select(Permission).where(Permission.id == permission_id)
        )
        return result.scalar_one_or_none()

    async def get_by_code(self, code: str) -> Permission | None:
        """Get a permission by code.

        Args:
            code: The permission code

        Returns:
            Permission if found, None otherwise
        """
        result = await self.session.execute(
            select(Permission).where(Permission.code == code)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Permission]:
        """List all permissions ordered by code.

        Returns:
            List of permissions with the roles granted each
        """
        stmt = (
            select(Permission)
            .order_by(Permission.code)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete(self, permission: Permission) -> None:
        """Delete a permission. Its grants cascade in the database.

        Args:
            permission: Permission instance to delete
        """
        await self.session.delete(permission)
        await self.session.flush()

    async def get_grant(self, role_id: UUID, permission_id: UUID) -> RolePermission | None:
        """Get a direct role-permission grant.

        Args:
            role_id: The role's UUID
            permission_id: The permission's UUID

        Returns:
            RolePermission if the role holds the permission directly, None otherwise
        """
        stmt = select(RolePermission).where(
            RolePermission.role_id == role_id,
            RolePermission.permission_id == permission_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def add_grant(self, grant: RolePermission) -> RolePermission:
        """Persist a new role-permission grant.

        Args:
            grant: RolePermission instance to create

        Returns:
            The created grant
        """
        self.session.add(grant)
        await self.session.flush()
        return grant

    async def delete_grant(self, grant: RolePermission) -> None:
        """Delete a role-permission grant.

        Args:
            grant: RolePermission instance to delete
        """
        await self.session.delete(grant)
        await self.session.flush()


# Type alias for dependency injection
PermissionRepo = Annotated[PermissionRepository, Depends(PermissionRepository)]

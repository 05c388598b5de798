"""Permission service for business logic."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends
from sqlalchemy.exc import IntegrityError

from rolegate.core.database import is_unique_violation
from rolegate.core.errors import ConflictError, NotFoundError, PermissionAlreadyGrantedError
from rolegate.core.permissions.models import Permission, RolePermission
from rolegate.modules.permissions.repos import PermissionRepo
from rolegate.modules.permissions.schemas import PermissionCreate
from rolegate.modules.roles.repos import RoleRepo


logger = structlog.get_logger()


class PermissionService:
    """Service for permission management and role grants."""

    def __init__(self, repo: PermissionRepo, role_repo: RoleRepo) -> None:
        self.repo = repo
        self.role_repo = role_repo

    async def list_permissions(self) -> list[Permission]:
        """List all permissions ordered by code."""
        return await self.repo.list_all()

    async def get_permission(self, permission_id: UUID) -> Permission:
        """Get a permission by ID.

        Args:
            permission_id: The permission's UUID

        Returns:
            The permission

        Raises:
            NotFoundError: If permission not found
        """
        permission = await self.repo.get_by_id(permission_id)
        if not permission:
            raise NotFoundError(
                "Permission not found",
                resource="permission",
                resource_id=str(permission_id),
            )
        return permission

    async def create_permission(self, data: PermissionCreate) -> Permission:
        """Create a new permission.

        Args:
            data: Permission creation data

        Returns:
            The created permission

        Raises:
            ConflictError: If the code already exists
        """
        existing = await self.repo.get_by_code(data.code)
        if existing:
            raise ConflictError(
                "Permission with this code already exists",
                error_code="permission_exists",
                details={"code": data.code},
            )

        permission = await self.repo.create(
            Permission(code=data.code, description=data.description)
        )
        logger.info("permission_created", permission_id=str(permission.id), code=permission.code)
        return permission

    async def delete_permission(self, permission_id: UUID) -> None:
        """Delete a permission and every grant of it.

        Args:
            permission_id: The permission's UUID

        Raises:
            NotFoundError: If permission not found
        """
        permission = await self.get_permission(permission_id)
        await self.repo.delete(permission)
        logger.info("permission_deleted", permission_id=str(permission_id), code=permission.code)

    async def assign_to_role(self, permission_id: UUID, role_id: UUID) -> RolePermission:
        """Grant a permission directly to a role.

        Args:
            permission_id: The permission to grant
            role_id: The role receiving it

        Returns:
            The created grant

        Raises:
            NotFoundError: If the role or permission does not exist
            PermissionAlreadyGrantedError: If the role already holds the permission directly
        """
        permission = await self.get_permission(permission_id)
        role = await self.role_repo.get_by_id(role_id)
        if not role:
            raise NotFoundError(
                "Role not found",
                resource="role",
                resource_id=str(role_id),
            )

        existing = await self.repo.get_grant(role_id, permission_id)
        if existing:
            raise PermissionAlreadyGrantedError(role_id, permission_id)

        try:
            grant = await self.repo.add_grant(
                RolePermission(role_id=role_id, permission_id=permission_id)
            )
        except IntegrityError as e:
            if is_unique_violation(e):
                raise PermissionAlreadyGrantedError(role_id, permission_id) from e
            # The role or permission was deleted after the lookups above
            raise NotFoundError(
                "Role or permission not found",
                resource="role_permission",
                resource_id=f"{role_id}:{permission_id}",
            ) from e

        logger.info("permission_granted", role=role.name, code=permission.code)
        return grant

    async def remove_from_role(self, permission_id: UUID, role_id: UUID) -> None:
        """Revoke a permission granted directly to a role.

        Args:
            permission_id: The permission's UUID
            role_id: The role's UUID

        Raises:
            NotFoundError: If the role does not hold the permission directly
        """
        grant = await self.repo.get_grant(role_id, permission_id)
        if not grant:
            raise NotFoundError(
                "Permission grant not found",
                resource="role_permission",
                resource_id=f"{role_id}:{permission_id}",
            )

        await self.repo.delete_grant(grant)
        logger.info("permission_revoked", role_id=str(role_id), permission_id=str(permission_id))


# Type alias for dependency injection
PermissionSvc = Annotated[PermissionService, Depends(PermissionService)]

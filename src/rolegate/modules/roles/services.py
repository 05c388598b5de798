"""Role service for business logic."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends
from sqlalchemy.exc import IntegrityError

from rolegate.core.errors import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    RoleHierarchyCycleError,
    RoleInUseError,
    ValidationError,
)
from rolegate.core.permissions.dependencies import RoleResolver
from rolegate.core.permissions.models import Role
from rolegate.modules.roles.repos import RoleRepo
from rolegate.modules.roles.schemas import RoleCreate, RoleUpdate


logger = structlog.get_logger()


class RoleService:
    """Service for role management operations.

    Enforces the preconditions the hierarchy resolver relies on: names
    are unique, parents exist, a parent change never closes a loop, and
    a role is only deleted once nobody holds it.
    """

    def __init__(self, repo: RoleRepo, resolver: RoleResolver) -> None:
        self.repo = repo
        self.resolver = resolver

    async def list_roles(self) -> list[tuple[Role, int]]:
        """List roles with their direct assignment counts.

        Returns:
            List of (role, user count) tuples ordered by role name
        """
        return await self.repo.list_with_user_counts()

    async def get_role(self, role_id: UUID) -> Role:
        """Get a role by ID.

        Args:
            role_id: The role's UUID

        Returns:
            The role

        Raises:
            NotFoundError: If role not found
        """
        role = await self.repo.get_by_id(role_id)
        if not role:
            raise NotFoundError(
                "Role not found",
                resource="role",
                resource_id=str(role_id),
            )
        return role

    async def count_users(self, role_id: UUID) -> int:
        """Count users directly assigned to a role."""
        return await self.repo.count_assignments(role_id)

    async def _ensure_name_available(self, name: str, role_id: UUID | None = None) -> None:
        existing = await self.repo.get_by_name(name)
        if existing and existing.id != role_id:
            raise ConflictError(
                "Role with this name already exists",
                error_code="role_exists",
                details={"name": name},
            )

    async def _ensure_parent_exists(self, parent_role_id: UUID) -> None:
        parent = await self.repo.get_by_id(parent_role_id)
        if not parent:
            raise ValidationError(
                "Parent role not found",
                error_code="parent_role_not_found",
                errors=[{"field": "parent_role_id", "message": "Parent role not found"}],
            )

    async def create_role(self, data: RoleCreate) -> Role:
        """Create a new role.

        Args:
            data: Role creation data

        Returns:
            The created role

        Raises:
            ConflictError: If the name is taken
            ValidationError: If the parent role does not exist
        """
        await self._ensure_name_available(data.name)
        if data.parent_role_id:
            await self._ensure_parent_exists(data.parent_role_id)

        role = await self.repo.create(
            Role(
                name=data.name,
                description=data.description,
                parent_role_id=data.parent_role_id,
            )
        )
        logger.info("role_created", role_id=str(role.id), name=role.name)
        return role

    async def update_role(self, role_id: UUID, data: RoleUpdate) -> Role:
        """Partially update a role.

        Args:
            role_id: The role's UUID
            data: Fields to change; unset fields are left alone

        Returns:
            The updated role

        Raises:
            NotFoundError: If role not found
            BadRequestError: If no fields were provided
            ConflictError: If the name is taken
            RoleHierarchyCycleError: If the new parent would create a cycle
            ValidationError: If the new parent does not exist
        """
        role = await self.get_role(role_id)
        updates = data.model_dump(exclude_unset=True)
        if not updates:
            raise BadRequestError("No fields to update", error_code="empty_update")

        if updates.get("name") is None:
            updates.pop("name", None)
        else:
            await self._ensure_name_available(updates["name"], role_id)

        parent_role_id = updates.get("parent_role_id")
        if parent_role_id is not None:
            if parent_role_id == role_id:
                raise RoleHierarchyCycleError(role_id, parent_role_id)
            await self._ensure_parent_exists(parent_role_id)

            # The new parent's chain must not lead back to this role
            if role_id in await self.resolver.ancestor_ids(parent_role_id):
                raise RoleHierarchyCycleError(role_id, parent_role_id)

        for field, value in updates.items():
            setattr(role, field, value)

        role = await self.repo.update(role)
        logger.info("role_updated", role_id=str(role_id), fields=sorted(updates))
        return role

    async def delete_role(self, role_id: UUID) -> None:
        """Delete a role nobody is assigned to.

        Args:
            role_id: The role's UUID

        Raises:
            NotFoundError: If role not found
            RoleInUseError: If any user still holds the role directly
        """
        role = await self.get_role(role_id)

        user_count = await self.repo.count_assignments(role_id)
        if user_count > 0:
            raise RoleInUseError(role_id, user_count)

        try:
            await self.repo.delete(role)
        except IntegrityError as e:
            # An assignment committed between the count and the delete
            logger.warning("role_delete_restricted", role_id=str(role_id))
            raise RoleInUseError(role_id) from e

        logger.info("role_deleted", role_id=str(role_id), name=role.name)


# Type alias for dependency injection
RoleSvc = Annotated[RoleService, Depends(RoleService)]

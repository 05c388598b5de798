"""Role repository for database operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import func, select

from rolegate.api.dependencies import DBSession
from rolegate.core.permissions.models import Role, UserRole


class RoleRepository:
    """Repository for Role database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, role: Role) -> Role:
        """Create a new role.

        Args:
            role: Role instance to create

        Returns:
            The created role with ID and relationships populated
        """
        self.session.add(role)
        await self.session.flush()
        await self.session.refresh(role)
        return role

    async def get_by_id(self, role_id: UUID) -> Role | None:
        """Get a role by ID.

        Args:
            role_id: The role's UUID

        Returns:
            Role if found, None otherwise
        """
        stmt = (
            select(Role)
            .where(Role.id == role_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Role | None:
        """Get a role by name.

        Args:
            name: The exact role name

        Returns:
            Role if found, None otherwise
        """
        result = await self.session.execute(select(Role).where(Role.name == name))
        return result.scalar_one_or_none()

    async def list_with_user_counts(self) -> list[tuple[Role, int]]:
        """List all roles by name with the number of users holding each.

        Returns:
            List of (role, direct assignment count) tuples
        """
        stmt = (
            select(Role, func.count(UserRole.user_id))
            .outerjoin(UserRole, UserRole.role_id == Role.id)
            .group_by(Role.id)
            .order_by(Role.name)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return [(role, count) for role, count in result.all()]

    async def count_assignments(self, role_id: UUID) -> int:
        """Count the users directly assigned to a role.

        Args:
            role_id: The role's UUID

        Returns:
            Number of direct user assignments
        """
        stmt = select(func.count()).select_from(UserRole).where(UserRole.role_id == role_id)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def update(self, role: Role) -> Role:
        """Update a role.

        Args:
            role: Role instance with updated fields

        Returns:
            The updated role
        """
        await self.session.flush()
        await self.session.refresh(role)
        return role

    async def delete(self, role: Role) -> None:
        """Delete a role.

        Grants cascade in the database; child roles are detached.

        Args:
            role: Role instance to delete
        """
        await self.session.delete(role)
        await self.session.flush()


# Type alias for dependency injection
RoleRepo = Annotated[RoleRepository, Depends(RoleRepository)]

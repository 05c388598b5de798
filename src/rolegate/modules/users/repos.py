"""User repository for database operations."""

from collections import defaultdict
from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import func, select

from rolegate.api.dependencies import DBSession
from rolegate.core.permissions.models import Role, UserRole
from rolegate.modules.users.models import User


class UserRepository:
    """Repository for User database operations.

    Handles all database interactions for the User model and for the
    user-role assignments hanging off it.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, user: User) -> User:
        """Create a new user.

        Args:
            user: User instance to create

        Returns:
            The created user with ID populated
        """
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: UUID) -> User | None:
        """Get a user by ID.

        Args:
            user_id: The user's UUID

        Returns:
            User if found, None otherwise
        """
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        """Get a user by email address.

        Args:
            email: The user's email

        Returns:
            User if found, None otherwise
        """
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def list_users(
        self,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[User], int]:
        """List users with pagination, newest first.

        Args:
            page: Page number (1-indexed)
            page_size: Number of items per page

        Returns:
            Tuple of (users list, total count)
        """
        # Count total
        count_result = await self.session.execute(select(func.count()).select_from(User))
        total = count_result.scalar_one()

        # Get paginated results
        offset = (page - 1) * page_size
        stmt = (
            select(User)
            .order_by(User.created_at.desc(), User.email)
            .offset(offset)
            .limit(page_size)
        )
        result = await self.session.execute(stmt)
        users = list(result.scalars().all())

        return users, total

    async def get_roles_for_users(self, user_ids: list[UUID]) -> dict[UUID, list[Role]]:
        """Get the directly assigned roles of several users in one query.

        Args:
            user_ids: Users to look up

        Returns:
            Mapping of user id to roles ordered by name. Users without
            roles are absent from the mapping.
        """
        if not user_ids:
            return {}

        stmt = (
            select(UserRole.user_id, Role)
            .join(Role, Role.id == UserRole.role_id)
            .where(UserRole.user_id.in_(user_ids))
            .order_by(Role.name)
        )
        result = await self.session.execute(stmt)

        roles: dict[UUID, list[Role]] = defaultdict(list)
        for user_id, role in result.all():
            roles[user_id].append(role)
        return dict(roles)

    async def get_assignment(self, user_id: UUID, role_id: UUID) -> UserRole | None:
        """Get a direct user-role assignment.

        Args:
            user_id: The user's UUID
            role_id: The role's UUID

        Returns:
            UserRole if the user holds the role directly, None otherwise
        """
        stmt = select(UserRole).where(
            UserRole.user_id == user_id,
            UserRole.role_id == role_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def add_assignment(self, assignment: UserRole) -> UserRole:
        """Persist a new user-role assignment.

        Args:
            assignment: UserRole instance to create

        Returns:
            The created assignment with ``assigned_at`` populated
        """
        self.session.add(assignment)
        await self.session.flush()
        await self.session.refresh(assignment)
        return assignment

    async def delete_assignment(self, assignment: UserRole) -> None:
        """Delete a user-role assignment.

        Args:
            assignment: UserRole instance to delete
        """
        await self.session.delete(assignment)
        await self.session.flush()


# Type alias for dependency injection
UserRepo = Annotated[UserRepository, Depends(UserRepository)]

"""User service for business logic."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends
from sqlalchemy.exc import IntegrityError

from rolegate.core.database import is_unique_violation
from rolegate.core.errors import ConflictError, NotFoundError, RoleAlreadyAssignedError
from rolegate.core.permissions.models import UserRole
from rolegate.core.permissions.schemas import RoleSummary
from rolegate.modules.roles.repos import RoleRepo
from rolegate.modules.users.models import User
from rolegate.modules.users.repos import UserRepo
from rolegate.modules.users.schemas import UserResponse


logger = structlog.get_logger()


class UserService:
    """Service for user and role-assignment operations.

    Users themselves are provisioned upstream; this service lists them
    and manages which roles they hold directly.
    """

    def __init__(self, repo: UserRepo, role_repo: RoleRepo) -> None:
        self.repo = repo
        self.role_repo = role_repo

    async def create_user(
        self,
        email: str,
        name: str | None = None,
        email_verified: bool = False,
    ) -> User:
        """Create a user record for an upstream identity.

        Args:
            email: The user's email
            name: Optional display name
            email_verified: Whether the email was verified upstream

        Returns:
            The created user

        Raises:
            ConflictError: If the email is already registered
        """
        existing = await self.repo.get_by_email(email)
        if existing:
            raise ConflictError(
                "Email already registered",
                error_code="email_exists",
                details={"email": email},
            )

        user = User(email=email, name=name, email_verified=email_verified)
        return await self.repo.create(user)

    async def get_user(self, user_id: UUID) -> User:
        """Get a user by ID.

        Args:
            user_id: The user's UUID

        Returns:
            The user

        Raises:
            NotFoundError: If user not found
        """
        user = await self.repo.get_by_id(user_id)
        if not user:
            raise NotFoundError(
                "User not found",
                resource="user",
                resource_id=str(user_id),
            )
        return user

    async def get_user_by_email(self, email: str) -> User:
        """Get a user by email.

        Args:
            email: The email address

        Returns:
            The user

        Raises:
            NotFoundError: If no user has this email
        """
        user = await self.repo.get_by_email(email)
        if not user:
            raise NotFoundError(
                "User not found",
                resource="user",
                resource_id=email,
            )
        return user

    async def list_users(
        self,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[UserResponse], int]:
        """List users together with their directly assigned roles.

        Args:
            page: Page number
            page_size: Items per page

        Returns:
            Tuple of (users list, total count)
        """
        users, total = await self.repo.list_users(page, page_size)
        roles = await self.repo.get_roles_for_users([user.id for user in users])

        items = [
            UserResponse(
                id=user.id,
                email=user.email,
                name=user.name,
                email_verified=user.email_verified,
                created_at=user.created_at,
                roles=[RoleSummary.model_validate(role) for role in roles.get(user.id, [])],
            )
            for user in users
        ]
        return items, total

    async def assign_role(
        self,
        user_id: UUID,
        role_id: UUID,
        assigned_by_id: UUID | None = None,
    ) -> UserRole:
        """Assign a role directly to a user.

        Args:
            user_id: The user receiving the role
            role_id: The role to assign
            assigned_by_id: The user performing the assignment, kept for audit

        Returns:
            The created assignment

        Raises:
            NotFoundError: If the user or role does not exist
            RoleAlreadyAssignedError: If the user already holds the role directly
        """
        role = await self.role_repo.get_by_id(role_id)
        if not role:
            raise NotFoundError(
                "Role not found",
                resource="role",
                resource_id=str(role_id),
            )

        await self.get_user(user_id)

        existing = await self.repo.get_assignment(user_id, role_id)
        if existing:
            raise RoleAlreadyAssignedError(user_id, role_id)

        try:
            assignment = await self.repo.add_assignment(
                UserRole(
                    user_id=user_id,
                    role_id=role_id,
                    assigned_by_id=assigned_by_id,
                )
            )
        except IntegrityError as e:
            # Lost a race with a concurrent assignment of the same pair
            if is_unique_violation(e):
                raise RoleAlreadyAssignedError(user_id, role_id) from e
            # The user or role was deleted after the lookups above
            raise NotFoundError(
                "User or role not found",
                resource="user_role",
                resource_id=f"{user_id}:{role_id}",
            ) from e

        logger.info(
            "role_assigned",
            user_id=str(user_id),
            role=role.name,
            assigned_by_id=str(assigned_by_id) if assigned_by_id else None,
        )
        return assignment

    async def remove_role(self, user_id: UUID, role_id: UUID) -> None:
        """Remove a directly assigned role from a user.

        Args:
            user_id: The user's UUID
            role_id: The role's UUID

        Raises:
            NotFoundError: If the user does not hold the role directly
        """
        assignment = await self.repo.get_assignment(user_id, role_id)
        if not assignment:
            raise NotFoundError(
                "Role assignment not found",
                resource="user_role",
                resource_id=f"{user_id}:{role_id}",
            )

        await self.repo.delete_assignment(assignment)
        logger.info("role_removed", user_id=str(user_id), role_id=str(role_id))


# Type alias for dependency injection
UserSvc = Annotated[UserService, Depends(UserService)]

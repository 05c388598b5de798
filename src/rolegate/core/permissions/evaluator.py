"""Permission checking logic.

This module provides functions for checking if a user has specific
permissions based on the roles directly assigned to them and the
permissions those roles inherit through the role hierarchy.
"""

from collections.abc import Iterable
from uuid import UUID

from rolegate.core.permissions.resolver import HierarchyResolver
from rolegate.core.permissions.schemas import RoleRecord
from rolegate.core.permissions.store import PermissionStore


class AccessEvaluator:
    """Service for checking user permissions.

    Evaluates whether a user holds permission codes through their
    directly assigned roles and those roles' parent chains. Role
    membership checks, by contrast, only look at direct assignments.

    Every method is a read; calls are safe to repeat and to run
    concurrently.
    """

    def __init__(
        self,
        store: PermissionStore,
        resolver: HierarchyResolver | None = None,
    ) -> None:
        self.store = store
        self.resolver = resolver or HierarchyResolver(store)

    async def get_user_roles(self, user_id: UUID) -> list[RoleRecord]:
        """Get all roles directly assigned to a user.

        Args:
            user_id: The user's UUID

        Returns:
            List of roles assigned to the user, without hierarchy expansion
        """
        return await self.store.get_user_roles(user_id)

    async def get_user_permissions(self, user_id: UUID) -> set[str]:
        """Get the effective permission set for a user.

        Args:
            user_id: The user's UUID

        Returns:
            Set of permission codes granted by every assigned role and
            its ancestors
        """
        roles = await self.store.get_user_roles(user_id)
        permissions: set[str] = set()

        # One visited set for all roles: ancestors shared by two assigned
        # roles are fetched once. The union is the same either way.
        visited: set[UUID] = set()
        for role in roles:
            permissions |= await self.resolver.resolve_permissions(role.id, visited)

        return permissions

    async def has_permission(self, user_id: UUID, code: str) -> bool:
        """Check if a user has a specific permission.

        Args:
            user_id: The user's UUID
            code: The permission code to check (e.g., "manage_roles")

        Returns:
            True if the user has the permission, False otherwise
        """
        return code in await self.get_user_permissions(user_id)

    async def has_role(self, user_id: UUID, role_name: str) -> bool:
        """Check if a user is directly assigned a role.

        Inheritance does not count: a user holding a child role does not
        "have" its parent role, even though they hold its permissions.

        Args:
            user_id: The user's UUID
            role_name: The exact role name

        Returns:
            True if the user is directly assigned the role
        """
        role = await self.store.get_role_by_name(role_name)
        if role is None:
            return False

        roles = await self.store.get_user_roles(user_id)
        return any(assigned.id == role.id for assigned in roles)

    async def check_access(self, user_id: UUID, codes: Iterable[str]) -> bool:
        """Check if a user has all of the specified permissions.

        Args:
            user_id: The user's UUID
            codes: Permission codes that are all required

        Returns:
            True if the user has every code. True for an empty list.
        """
        required = list(codes)
        if not required:
            return True

        permissions = await self.get_user_permissions(user_id)
        return all(code in permissions for code in required)

    async def check_any_access(self, user_id: UUID, codes: Iterable[str]) -> bool:
        """Check if a user has any of the specified permissions.

        An empty list means nothing is required, so access is allowed.
        Callers that mean to require something must pass at least one code.

        Args:
            user_id: The user's UUID
            codes: Permission codes of which one suffices

        Returns:
            True if the user has at least one code. True for an empty list.
        """
        required = list(codes)
        if not required:
            return True

        permissions = await self.get_user_permissions(user_id)
        return any(code in permissions for code in required)

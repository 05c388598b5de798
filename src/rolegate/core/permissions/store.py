"""Read access to roles and grants for the permission engine.

The resolver and evaluator depend only on the ``PermissionStore``
protocol. ``SQLAlchemyPermissionStore`` is the production implementation;
it selects plain columns rather than ORM entities so every call reflects
the database at the moment the query runs, independent of whatever the
session already holds in its identity map.
"""

from typing import Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.core.permissions.models import Permission, Role, RolePermission, UserRole
from rolegate.core.permissions.schemas import RoleNode, RoleRecord


class PermissionStore(Protocol):
    """Read operations the permission engine needs from storage.

    Implementations must let connectivity errors, timeouts and
    cancellation propagate. Returning ``None`` or an empty list is
    reserved for "does not exist".
    """

    async def get_role(self, role_id: UUID) -> RoleNode | None:
        """Fetch a role with its direct permission codes and parent id."""
        ...

    async def get_user_roles(self, user_id: UUID) -> list[RoleRecord]:
        """Fetch every role directly assigned to a user."""
        ...

    async def get_role_by_name(self, name: str) -> RoleRecord | None:
        """Fetch a role by its unique name."""
        ...


_ROLE_COLUMNS = (Role.id, Role.name, Role.description, Role.parent_role_id)


class SQLAlchemyPermissionStore:
    """PermissionStore backed by an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_role(self, role_id: UUID) -> RoleNode | None:
        """Fetch a role with its direct permission codes.

        Args:
            role_id: The role's UUID

        Returns:
            RoleNode if the role exists, None otherwise
        """
        result = await self.session.execute(
            select(*_ROLE_COLUMNS).where(Role.id == role_id)
        )
        row = result.one_or_none()
        if row is None:
            return None

        codes_result = await self.session.execute(
            select(Permission.code)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role_id == role_id)
        )
        return RoleNode(
            id=row.id,
            name=row.name,
            description=row.description,
            parent_role_id=row.parent_role_id,
            permission_codes=frozenset(codes_result.scalars().all()),
        )

    async def get_user_roles(self, user_id: UUID) -> list[RoleRecord]:
        """Fetch the roles directly assigned to a user.

        Args:
            user_id: The user's UUID

        Returns:
            List of role records, ordered by name
        """
        result = await self.session.execute(
            select(*_ROLE_COLUMNS)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id)
            .order_by(Role.name)
        )
        return [RoleRecord.model_validate(dict(row._mapping)) for row in result.all()]

    async def get_role_by_name(self, name: str) -> RoleRecord | None:
        """Fetch a role by name.

        Args:
            name: The exact role name

        Returns:
            RoleRecord if found, None otherwise
        """
        result = await self.session.execute(
            select(*_ROLE_COLUMNS).where(Role.name == name)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return RoleRecord.model_validate(dict(row._mapping))

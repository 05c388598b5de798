"""Role hierarchy resolution.

Each role has at most one parent, so a role's ancestry is a chain. The
resolver follows that chain iteratively, collecting permission codes, and
stops on whichever comes first:

- the chain ends (no parent),
- the next role does not exist (deleted concurrently, treated as empty),
- the next role was already visited during this resolution.

A role revisited inside the chain that is currently being walked means
the stored hierarchy contains a cycle. That is a data-integrity problem
upstream, so it is logged as a warning; resolution still terminates with
every role on the cycle counted exactly once.

Precondition: roles with active user assignments are never deleted (the
role service enforces this), so a missing role only shows up through a
concurrent delete or a dangling parent reference.
"""

from collections.abc import AsyncIterator
from uuid import UUID

import structlog

from rolegate.core.permissions.schemas import RoleNode
from rolegate.core.permissions.store import PermissionStore


logger = structlog.get_logger()


class HierarchyResolver:
    """Resolves the permission codes a role grants through its parent chain.

    The resolver holds no state between calls. Store errors propagate
    unchanged; nothing is retried.
    """

    def __init__(self, store: PermissionStore) -> None:
        self.store = store

    async def walk(
        self,
        role_id: UUID,
        visited: set[UUID] | None = None,
    ) -> AsyncIterator[RoleNode]:
        """Yield a role and then each of its ancestors.

        Args:
            role_id: The role to start from
            visited: Role ids already handled in this resolution. Updated in
                place so callers can share it across several starting roles.

        Yields:
            Each role on the chain, starting with ``role_id`` itself
        """
        if visited is None:
            visited = set()

        chain: list[UUID] = []
        current: UUID | None = role_id

        while current is not None:
            if current in chain:
                logger.warning(
                    "role_hierarchy_cycle_detected",
                    role_id=str(current),
                    chain=[str(chain_id) for chain_id in chain],
                )
                return
            if current in visited:
                return

            visited.add(current)
            chain.append(current)

            role = await self.store.get_role(current)
            if role is None:
                return

            yield role
            current = role.parent_role_id

    async def resolve_permissions(
        self,
        role_id: UUID,
        visited: set[UUID] | None = None,
    ) -> set[str]:
        """Get every permission code a role grants, including inherited ones.

        Args:
            role_id: The role's UUID. An id that does not resolve to a role
                yields an empty set.
            visited: Optional visited set shared with other resolutions

        Returns:
            Set of permission codes
        """
        codes: set[str] = set()
        async for role in self.walk(role_id, visited):
            codes.update(role.permission_codes)
        return codes

    async def ancestor_ids(self, role_id: UUID) -> list[UUID]:
        """Get the ids along a role's chain, the role itself first.

        Args:
            role_id: The role to start from

        Returns:
            Ordered list of role ids
        """
        return [role.id async for role in self.walk(role_id)]

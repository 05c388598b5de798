"""In-memory permission store for engine unit tests."""

from collections.abc import Iterable
from uuid import UUID, uuid4

from rolegate.core.permissions.schemas import RoleNode, RoleRecord


class InMemoryPermissionStore:
    """PermissionStore backed by dictionaries.

    Roles can point at any parent id, including ids that do not exist and
    ids that lead back to the role itself, so tests can build hierarchies
    the database layer would never produce on its own. ``calls`` records
    every ``get_role`` lookup in order.
    """

    def __init__(self) -> None:
        self.roles: dict[UUID, RoleNode] = {}
        self.assignments: dict[UUID, list[UUID]] = {}
        self.calls: list[UUID] = []
        self.error: Exception | None = None

    def add_role(
        self,
        name: str,
        codes: Iterable[str] = (),
        parent: UUID | RoleNode | None = None,
        role_id: UUID | None = None,
    ) -> RoleNode:
        """Add a role and return it."""
        parent_id = parent.id if isinstance(parent, RoleNode) else parent
        role = RoleNode(
            id=role_id or uuid4(),
            name=name,
            parent_role_id=parent_id,
            permission_codes=frozenset(codes),
        )
        self.roles[role.id] = role
        return role

    def set_parent(self, role: RoleNode, parent: RoleNode | None) -> RoleNode:
        """Re-point a role at a new parent, allowing cycles."""
        updated = role.model_copy(update={"parent_role_id": parent.id if parent else None})
        self.roles[role.id] = updated
        return updated

    def assign(self, user_id: UUID, *roles: RoleNode) -> None:
        """Assign roles directly to a user."""
        self.assignments.setdefault(user_id, []).extend(role.id for role in roles)

    async def get_role(self, role_id: UUID) -> RoleNode | None:
        if self.error:
            raise self.error
        self.calls.append(role_id)
        return self.roles.get(role_id)

    async def get_user_roles(self, user_id: UUID) -> list[RoleRecord]:
        if self.error:
            raise self.error
        records = [
            RoleRecord.model_validate(self.roles[role_id].model_dump(exclude={"permission_codes"}))
            for role_id in self.assignments.get(user_id, [])
            if role_id in self.roles
        ]
        return sorted(records, key=lambda role: role.name)

    async def get_role_by_name(self, name: str) -> RoleRecord | None:
        if self.error:
            raise self.error
        for role in self.roles.values():
            if role.name == name:
                return RoleRecord.model_validate(role.model_dump(exclude={"permission_codes"}))
        return None

"""Integration tests for role endpoints."""

from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.core.permissions.models import Role, UserRole
from rolegate.modules.roles.repos import RoleRepository
from rolegate.modules.users.models import User
from tests.helpers import AssignRole, CreateRole, error_code


pytestmark = pytest.mark.integration


class TestRoleAccessControl:
    """Tests for who may call the role endpoints."""

    async def test_list_roles_requires_identity(self, client: AsyncClient):
        """Test that a request without identity is rejected."""
        response = await client.get("/api/v1/roles")

        assert response.status_code == 401

    async def test_list_roles_requires_manage_roles(self, member_client: AsyncClient):
        """Test that a user without manage_roles is forbidden."""
        response = await member_client.get("/api/v1/roles")

        assert response.status_code == 403
        assert error_code(response.json()) == "permission_denied"

    async def test_create_role_forbidden_for_member(self, member_client: AsyncClient):
        """Test that a forbidden caller cannot create roles."""
        response = await member_client.post("/api/v1/roles", json={"name": "sneaky"})

        assert response.status_code == 403


class TestRoleCrud:
    """Tests for creating, reading, updating and deleting roles."""

    async def test_list_roles(
        self,
        admin_client: AsyncClient,
        create_role: CreateRole,
        admin_role: Role,
    ):
        """Test listing roles with parent, permissions and user count."""
        parent = await create_role("user", codes=["view_dashboard"])
        await create_role("moderator", parent=parent)

        response = await admin_client.get("/api/v1/roles")

        assert response.status_code == 200
        data = {role["name"]: role for role in response.json()}
        assert list(data) == ["admin", "moderator", "user"]
        assert data["admin"]["user_count"] == 1
        assert sorted(p["code"] for p in data["admin"]["permissions"]) == [
            "manage_permissions",
            "manage_roles",
            "manage_users",
        ]
        assert data["moderator"]["parent_role"]["name"] == "user"
        assert data["moderator"]["permissions"] == []
        assert data["user"]["parent_role"] is None

    async def test_create_role(self, admin_client: AsyncClient, create_role: CreateRole):
        """Test creating a role under an existing parent."""
        parent = await create_role("user")

        response = await admin_client.post(
            "/api/v1/roles",
            json={
                "name": "  moderator ",
                "description": "Moderates content",
                "parent_role_id": str(parent.id),
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "moderator"
        assert data["description"] == "Moderates content"
        assert data["parent_role"]["id"] == str(parent.id)
        assert data["user_count"] == 0

    async def test_create_role_duplicate_name(self, admin_client: AsyncClient):
        """Test a taken name is a conflict."""
        response = await admin_client.post("/api/v1/roles", json={"name": "admin"})

        assert response.status_code == 409
        assert error_code(response.json()) == "role_exists"

    async def test_create_role_blank_name(self, admin_client: AsyncClient):
        """Test a whitespace-only name fails validation."""
        response = await admin_client.post("/api/v1/roles", json={"name": "   "})

        assert response.status_code == 422

    async def test_create_role_missing_parent(self, admin_client: AsyncClient):
        """Test an unknown parent id fails validation."""
        response = await admin_client.post(
            "/api/v1/roles",
            json={"name": "orphan", "parent_role_id": str(uuid4())},
        )

        assert response.status_code == 422
        data = response.json()
        assert error_code(data) == "parent_role_not_found"
        assert data["errors"][0]["field"] == "parent_role_id"

    async def test_get_role(self, admin_client: AsyncClient, admin_role: Role):
        """Test fetching a single role."""
        response = await admin_client.get(f"/api/v1/roles/{admin_role.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "admin"
        assert data["user_count"] == 1

    async def test_get_missing_role(self, admin_client: AsyncClient):
        """Test fetching an unknown role returns 404."""
        response = await admin_client.get(f"/api/v1/roles/{uuid4()}")

        assert response.status_code == 404

    async def test_update_role(self, admin_client: AsyncClient, create_role: CreateRole):
        """Test renaming and describing a role."""
        role = await create_role("editor")

        response = await admin_client.patch(
            f"/api/v1/roles/{role.id}",
            json={"name": "writer", "description": "Writes"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "writer"
        assert data["description"] == "Writes"

    async def test_update_role_empty_body(self, admin_client: AsyncClient, admin_role: Role):
        """Test an update without fields is a bad request."""
        response = await admin_client.patch(f"/api/v1/roles/{admin_role.id}", json={})

        assert response.status_code == 400
        assert error_code(response.json()) == "empty_update"

    async def test_update_role_detach_parent(
        self,
        admin_client: AsyncClient,
        create_role: CreateRole,
    ):
        """Test an explicit null parent detaches the role."""
        parent = await create_role("user")
        child = await create_role("moderator", parent=parent)

        response = await admin_client.patch(
            f"/api/v1/roles/{child.id}",
            json={"parent_role_id": None},
        )

        assert response.status_code == 200
        assert response.json()["parent_role"] is None

    async def test_update_role_self_parent(self, admin_client: AsyncClient, admin_role: Role):
        """Test a role cannot be made its own parent."""
        response = await admin_client.patch(
            f"/api/v1/roles/{admin_role.id}",
            json={"parent_role_id": str(admin_role.id)},
        )

        assert response.status_code == 409
        assert error_code(response.json()) == "role_hierarchy_cycle"

    async def test_update_role_parent_cycle(
        self,
        admin_client: AsyncClient,
        create_role: CreateRole,
    ):
        """Test re-parenting a role under its own descendant is rejected."""
        root = await create_role("root")
        middle = await create_role("middle", parent=root)
        leaf = await create_role("leaf", parent=middle)

        response = await admin_client.patch(
            f"/api/v1/roles/{root.id}",
            json={"parent_role_id": str(leaf.id)},
        )

        assert response.status_code == 409
        assert error_code(response.json()) == "role_hierarchy_cycle"

        response = await admin_client.get(f"/api/v1/roles/{root.id}")
        assert response.json()["parent_role"] is None


class TestRoleDeletion:
    """Tests for deleting roles."""

    async def test_delete_role_in_use(
        self,
        admin_client: AsyncClient,
        create_role: CreateRole,
        assign_role: AssignRole,
        member: User,
    ):
        """Test a role with users cannot be deleted."""
        role = await create_role("editor", codes=["edit_posts"])
        await assign_role(member, role)

        response = await admin_client.delete(f"/api/v1/roles/{role.id}")

        assert response.status_code == 409
        data = response.json()
        assert error_code(data) == "role_in_use"
        assert data["user_count"] == 1

        response = await admin_client.get(f"/api/v1/roles/{role.id}")
        assert response.status_code == 200

    async def test_delete_role_assigned_after_count(
        self,
        admin_client: AsyncClient,
        create_role: CreateRole,
        db: AsyncSession,
        member: User,
        monkeypatch: pytest.MonkeyPatch,
    ):
        """Test an assignment made after the in-use check still blocks the delete."""
        role = await create_role("editor", codes=["edit_posts"])
        count_assignments = RoleRepository.count_assignments

        async def count_then_assign(self: RoleRepository, role_id: UUID) -> int:
            count = await count_assignments(self, role_id)
            db.add(UserRole(user_id=member.id, role_id=role_id))
            await db.flush()
            return count

        monkeypatch.setattr(RoleRepository, "count_assignments", count_then_assign)

        response = await admin_client.delete(f"/api/v1/roles/{role.id}")

        assert response.status_code == 409
        data = response.json()
        assert error_code(data) == "role_in_use"
        assert "user_count" not in data

    def test_assignments_restrict_role_delete(self):
        """Test the schema refuses to drop assignments along with their role."""
        (foreign_key,) = UserRole.__table__.c.role_id.foreign_keys

        assert foreign_key.ondelete == "RESTRICT"

    async def test_delete_unused_role(self, admin_client: AsyncClient, create_role: CreateRole):
        """Test a role nobody holds is deleted."""
        role = await create_role("editor", codes=["edit_posts"])

        response = await admin_client.delete(f"/api/v1/roles/{role.id}")

        assert response.status_code == 204
        response = await admin_client.get(f"/api/v1/roles/{role.id}")
        assert response.status_code == 404

    async def test_delete_parent_detaches_children(
        self,
        admin_client: AsyncClient,
        create_role: CreateRole,
    ):
        """Test deleting a parent leaves its children without a parent."""
        parent = await create_role("user")
        child = await create_role("moderator", parent=parent)

        response = await admin_client.delete(f"/api/v1/roles/{parent.id}")
        assert response.status_code == 204

        response = await admin_client.get(f"/api/v1/roles/{child.id}")
        assert response.status_code == 200
        assert response.json()["parent_role"] is None

    async def test_delete_missing_role(self, admin_client: AsyncClient):
        """Test deleting an unknown role returns 404."""
        response = await admin_client.delete(f"/api/v1/roles/{uuid4()}")

        assert response.status_code == 404

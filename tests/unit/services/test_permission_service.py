"""Unit tests for permission service grants."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from rolegate.core.errors import ConflictError, NotFoundError, PermissionAlreadyGrantedError
from rolegate.core.permissions.models import Permission, Role, RolePermission
from rolegate.modules.permissions.schemas import PermissionCreate
from rolegate.modules.permissions.services import PermissionService


pytestmark = pytest.mark.unit


class TestPermissionService:
    """Tests for PermissionService."""

    @pytest.fixture
    def permission(self) -> Permission:
        """An existing permission."""
        return Permission(id=uuid4(), code="view_reports")

    @pytest.fixture
    def role(self) -> Role:
        """An existing role."""
        return Role(id=uuid4(), name="analyst")

    @pytest.fixture
    def repo(self, permission):
        """Create a mock permission repository."""
        repo = AsyncMock()
        repo.get_by_id.return_value = permission
        repo.get_by_code.return_value = None
        repo.get_grant.return_value = None
        repo.create.side_effect = lambda p: p
        repo.add_grant.side_effect = lambda grant: grant
        return repo

    @pytest.fixture
    def role_repo(self, role):
        """Create a mock role repository."""
        role_repo = AsyncMock()
        role_repo.get_by_id.return_value = role
        return role_repo

    @pytest.fixture
    def service(self, repo, role_repo) -> PermissionService:
        """Create the service under test."""
        return PermissionService(repo, role_repo)

    async def test_create_permission(self, service, repo):
        """Test creating a permission with a new code."""
        permission = await service.create_permission(
            PermissionCreate(code=" export_data ", description="Export")
        )

        assert permission.code == "export_data"
        repo.create.assert_awaited_once()

    async def test_create_permission_duplicate_code(self, service, repo, permission):
        """Test an existing code is rejected."""
        repo.get_by_code.return_value = permission

        with pytest.raises(ConflictError) as exc_info:
            await service.create_permission(PermissionCreate(code="view_reports"))

        assert exc_info.value.error_code == "permission_exists"
        repo.create.assert_not_awaited()

    async def test_delete_missing_permission(self, service, repo):
        """Test deleting an unknown permission raises NotFoundError."""
        repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await service.delete_permission(uuid4())

        repo.delete.assert_not_awaited()

    async def test_assign_to_role(self, service, repo, permission, role):
        """Test granting a permission to a role."""
        grant = await service.assign_to_role(permission.id, role.id)

        assert grant.role_id == role.id
        assert grant.permission_id == permission.id
        repo.add_grant.assert_awaited_once()

    async def test_assign_to_role_duplicate(self, service, repo, permission, role):
        """Test granting a held permission again is rejected without writing."""
        repo.get_grant.return_value = RolePermission(role_id=role.id, permission_id=permission.id)

        with pytest.raises(PermissionAlreadyGrantedError) as exc_info:
            await service.assign_to_role(permission.id, role.id)

        assert exc_info.value.error_code == "permission_already_granted"
        repo.add_grant.assert_not_awaited()

    async def test_assign_to_role_deleted_meanwhile(self, service, repo, permission, role):
        """Test a grant whose role vanished before the insert is not found, not a duplicate."""
        repo.add_grant.side_effect = IntegrityError(
            "INSERT INTO role_permissions",
            {},
            Exception("FOREIGN KEY constraint failed"),
        )

        with pytest.raises(NotFoundError) as exc_info:
            await service.assign_to_role(permission.id, role.id)

        assert exc_info.value.details["resource"] == "role_permission"

    async def test_assign_to_role_concurrent_duplicate(self, service, repo, permission, role):
        """Test a unique violation on insert is reported as already granted."""
        repo.add_grant.side_effect = IntegrityError(
            "INSERT INTO role_permissions",
            {},
            Exception('duplicate key value violates unique constraint "uq_role_permission"'),
        )

        with pytest.raises(PermissionAlreadyGrantedError):
            await service.assign_to_role(permission.id, role.id)

    async def test_assign_to_missing_role(self, service, repo, role_repo, permission):
        """Test granting to an unknown role raises NotFoundError."""
        role_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await service.assign_to_role(permission.id, uuid4())

        assert exc_info.value.details["resource"] == "role"
        repo.add_grant.assert_not_awaited()

    async def test_remove_missing_grant(self, service, repo, permission, role):
        """Test revoking a permission the role does not hold raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await service.remove_from_role(permission.id, role.id)

        repo.delete_grant.assert_not_awaited()

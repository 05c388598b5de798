"""Role-based access control: models, hierarchy resolution and checks."""

from rolegate.core.permissions.decorators import (
    require_all_permissions,
    require_any_permission,
    require_permission,
    require_role,
)
from rolegate.core.permissions.evaluator import AccessEvaluator
from rolegate.core.permissions.models import Permission, Role, RolePermission, UserRole
from rolegate.core.permissions.resolver import HierarchyResolver
from rolegate.core.permissions.schemas import RoleNode, RoleRecord, UserRoleRecord
from rolegate.core.permissions.store import PermissionStore, SQLAlchemyPermissionStore


__all__ = [
    "AccessEvaluator",
    "HierarchyResolver",
    "Permission",
    "PermissionStore",
    "Role",
    "RoleNode",
    "RolePermission",
    "RoleRecord",
    "SQLAlchemyPermissionStore",
    "UserRole",
    "UserRoleRecord",
    "require_all_permissions",
    "require_any_permission",
    "require_permission",
    "require_role",
]

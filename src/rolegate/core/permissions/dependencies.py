"""FastAPI dependencies wiring the permission engine to the request session."""

from typing import Annotated

from fastapi import Depends

from rolegate.api.dependencies import DBSession
from rolegate.core.permissions.evaluator import AccessEvaluator
from rolegate.core.permissions.resolver import HierarchyResolver
from rolegate.core.permissions.store import SQLAlchemyPermissionStore


def get_permission_store(db: DBSession) -> SQLAlchemyPermissionStore:
    """Provide a permission store bound to the request's session."""
    return SQLAlchemyPermissionStore(db)


PermissionStoreDep = Annotated[SQLAlchemyPermissionStore, Depends(get_permission_store)]


def get_hierarchy_resolver(store: PermissionStoreDep) -> HierarchyResolver:
    """Provide a hierarchy resolver for the request."""
    return HierarchyResolver(store)


RoleResolver = Annotated[HierarchyResolver, Depends(get_hierarchy_resolver)]


def get_access_evaluator(
    store: PermissionStoreDep,
    resolver: RoleResolver,
) -> AccessEvaluator:
    """Provide an access evaluator for the request."""
    return AccessEvaluator(store, resolver)


AccessEval = Annotated[AccessEvaluator, Depends(get_access_evaluator)]

"""User API routes.

Provides endpoints for:
- Listing users with their directly assigned roles
- Inspecting and checking effective access
- Assigning and removing roles
"""

from uuid import UUID

from fastapi import Query, Response, status

from rolegate.api.dependencies import DBSession
from rolegate.core.auth import CurrentUserId
from rolegate.core.constants import (
    DEFAULT_PAGE_SIZE,
    MANAGE_PERMISSIONS,
    MANAGE_ROLES,
    MANAGE_USERS,
    MAX_PAGE_SIZE,
)
from rolegate.core.permissions.decorators import require_permission
from rolegate.core.permissions.dependencies import AccessEval
from rolegate.core.permissions.evaluator import AccessEvaluator
from rolegate.core.permissions.schemas import RoleSummary, UserRoleRecord
from rolegate.modules.users import router
from rolegate.modules.users.schemas import (
    AccessCheckRequest,
    AccessCheckResponse,
    AccessResponse,
    RoleAssignmentCreate,
    UserListResponse,
)
from rolegate.modules.users.services import UserSvc


async def _build_access(user_id: UUID, evaluator: AccessEvaluator) -> AccessResponse:
    """Collect a user's direct roles and effective permissions."""
    roles = await evaluator.get_user_roles(user_id)
    permissions = await evaluator.get_user_permissions(user_id)

    return AccessResponse(
        user_id=user_id,
        roles=[RoleSummary(id=role.id, name=role.name) for role in roles],
        permissions=sorted(permissions),
        can_manage_users=MANAGE_USERS in permissions,
        can_manage_roles=MANAGE_ROLES in permissions,
        can_manage_permissions=MANAGE_PERMISSIONS in permissions,
    )


@router.get(
    "",
    response_model=UserListResponse,
    summary="List users",
    description="List users, newest first, each with their directly assigned roles.",
)
@require_permission(MANAGE_USERS)
async def list_users(
    service: UserSvc,
    current_user_id: CurrentUserId,  # noqa: ARG001
    db: DBSession,  # noqa: ARG001
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
) -> UserListResponse:
    """List users with pagination."""
    items, total = await service.list_users(page, page_size)
    return UserListResponse(items=items, total=total, page=page, page_size=page_size)


@router.get(
    "/me/access",
    response_model=AccessResponse,
    summary="Get my access",
    description="Return the caller's direct roles and effective permission codes.",
)
async def get_my_access(
    current_user_id: CurrentUserId,
    evaluator: AccessEval,
) -> AccessResponse:
    """Get the caller's effective access."""
    return await _build_access(current_user_id, evaluator)


@router.post(
    "/me/access/check",
    response_model=AccessCheckResponse,
    summary="Check my access",
    description=(
        "Check permission codes against the caller. mode=all requires every "
        "code, mode=any requires at least one. An empty list is always allowed."
    ),
)
async def check_my_access(
    data: AccessCheckRequest,
    current_user_id: CurrentUserId,
    evaluator: AccessEval,
) -> AccessCheckResponse:
    """Check the caller against a list of permission codes."""
    if data.mode == "any":
        allowed = await evaluator.check_any_access(current_user_id, data.permissions)
    else:
        allowed = await evaluator.check_access(current_user_id, data.permissions)

    return AccessCheckResponse(
        allowed=allowed,
        mode=data.mode,
        permissions=data.permissions,
    )


@router.get(
    "/{user_id}/access",
    response_model=AccessResponse,
    summary="Get user access",
    description="Return a user's direct roles and effective permission codes.",
)
@require_permission(MANAGE_USERS)
async def get_user_access(
    user_id: UUID,
    service: UserSvc,
    evaluator: AccessEval,
    current_user_id: CurrentUserId,  # noqa: ARG001
    db: DBSession,  # noqa: ARG001
) -> AccessResponse:
    """Get another user's effective access."""
    await service.get_user(user_id)
    return await _build_access(user_id, evaluator)


@router.post(
    "/{user_id}/roles",
    response_model=UserRoleRecord,
    status_code=status.HTTP_201_CREATED,
    summary="Assign role",
    description="Assign a role directly to a user. Assigning a held role is a conflict.",
)
@require_permission(MANAGE_USERS)
async def assign_role(
    user_id: UUID,
    data: RoleAssignmentCreate,
    service: UserSvc,
    current_user_id: CurrentUserId,
    db: DBSession,  # noqa: ARG001
) -> UserRoleRecord:
    """Assign a role to a user."""
    assignment = await service.assign_role(
        user_id,
        data.role_id,
        assigned_by_id=current_user_id,
    )
    return UserRoleRecord.model_validate(assignment)


@router.delete(
    "/{user_id}/roles/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Remove role",
    description="Remove a directly assigned role from a user.",
)
@require_permission(MANAGE_USERS)
async def remove_role(
    user_id: UUID,
    role_id: UUID,
    service: UserSvc,
    current_user_id: CurrentUserId,  # noqa: ARG001
    db: DBSession,  # noqa: ARG001
) -> None:
    """Remove a role from a user."""
    await service.remove_role(user_id, role_id)

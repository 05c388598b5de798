"""Role API routes."""

from uuid import UUID

from fastapi import Response, status

from rolegate.api.dependencies import DBSession
from rolegate.core.auth import CurrentUserId
from rolegate.core.constants import MANAGE_ROLES
from rolegate.core.permissions.decorators import require_permission
from rolegate.modules.roles import router
from rolegate.modules.roles.schemas import RoleCreate, RoleResponse, RoleUpdate
from rolegate.modules.roles.services import RoleSvc


@router.get(
    "",
    response_model=list[RoleResponse],
    summary="List roles",
    description="List roles with their parent, direct permissions and user count.",
)
@require_permission(MANAGE_ROLES)
async def list_roles(
    service: RoleSvc,
    current_user_id: CurrentUserId,  # noqa: ARG001
    db: DBSession,  # noqa: ARG001
) -> list[RoleResponse]:
    """List all roles."""
    roles = await service.list_roles()
    return [RoleResponse.from_role(role, count) for role, count in roles]


@router.post(
    "",
    response_model=RoleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create role",
    description="Create a role, optionally inheriting from an existing parent role.",
)
@require_permission(MANAGE_ROLES)
async def create_role(
    data: RoleCreate,
    service: RoleSvc,
    current_user_id: CurrentUserId,  # noqa: ARG001
    db: DBSession,  # noqa: ARG001
) -> RoleResponse:
    """Create a role."""
    role = await service.create_role(data)
    return RoleResponse.from_role(role, 0)


@router.get(
    "/{role_id}",
    response_model=RoleResponse,
    summary="Get role",
)
@require_permission(MANAGE_ROLES)
async def get_role(
    role_id: UUID,
    service: RoleSvc,
    current_user_id: CurrentUserId,  # noqa: ARG001
    db: DBSession,  # noqa: ARG001
) -> RoleResponse:
    """Get a role by ID."""
    role = await service.get_role(role_id)
    return RoleResponse.from_role(role, await service.count_users(role_id))


@router.patch(
    "/{role_id}",
    response_model=RoleResponse,
    summary="Update role",
    description="Partially update a role. A parent that would create a cycle is rejected.",
)
@require_permission(MANAGE_ROLES)
async def update_role(
    role_id: UUID,
    data: RoleUpdate,
    service: RoleSvc,
    current_user_id: CurrentUserId,  # noqa: ARG001
    db: DBSession,  # noqa: ARG001
) -> RoleResponse:
    """Update a role."""
    role = await service.update_role(role_id, data)
    return RoleResponse.from_role(role, await service.count_users(role_id))


@router.delete(
    "/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete role",
    description="Delete a role. Fails while any user is still assigned to it.",
)
@require_permission(MANAGE_ROLES)
async def delete_role(
    role_id: UUID,
    service: RoleSvc,
    current_user_id: CurrentUserId,  # noqa: ARG001
    db: DBSession,  # noqa: ARG001
) -> None:
    """Delete a role."""
    await service.delete_role(role_id)

"""Permission API routes."""

from uuid import UUID

from fastapi import Response, status

from rolegate.api.dependencies import DBSession
from rolegate.core.auth import CurrentUserId
from rolegate.core.constants import MANAGE_PERMISSIONS
from rolegate.core.permissions.decorators import require_permission
from rolegate.modules.permissions import router
from rolegate.modules.permissions.schemas import PermissionCreate, PermissionResponse
from rolegate.modules.permissions.services import PermissionSvc


@router.get(
    "",
    response_model=list[PermissionResponse],
    summary="List permissions",
    description="List permissions by code, each with the roles it is granted to directly.",
)
@require_permission(MANAGE_PERMISSIONS)
async def list_permissions(
    service: PermissionSvc,
    current_user_id: CurrentUserId,  # noqa: ARG001
    db: DBSession,  # noqa: ARG001
) -> list[PermissionResponse]:
    """List all permissions."""
    permissions = await service.list_permissions()
    return [PermissionResponse.model_validate(p) for p in permissions]


@router.post(
    "",
    response_model=PermissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create permission",
)
@require_permission(MANAGE_PERMISSIONS)
async def create_permission(
    data: PermissionCreate,
    service: PermissionSvc,
    current_user_id: CurrentUserId,  # noqa: ARG001
    db: DBSession,  # noqa: ARG001
) -> PermissionResponse:
    """Create a permission."""
    permission = await service.create_permission(data)
    return PermissionResponse.model_validate(permission)


@router.delete(
    "/{permission_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete permission",
    description="Delete a permission. Every role loses it immediately.",
)
@require_permission(MANAGE_PERMISSIONS)
async def delete_permission(
    permission_id: UUID,
    service: PermissionSvc,
    current_user_id: CurrentUserId,  # noqa: ARG001
    db: DBSession,  # noqa: ARG001
) -> None:
    """Delete a permission."""
    await service.delete_permission(permission_id)


@router.put(
    "/{permission_id}/roles/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Grant permission to role",
    description="Grant a permission directly to a role. Granting it twice is a conflict.",
)
@require_permission(MANAGE_PERMISSIONS)
async def grant_permission(
    permission_id: UUID,
    role_id: UUID,
    service: PermissionSvc,
    current_user_id: CurrentUserId,  # noqa: ARG001
    db: DBSession,  # noqa: ARG001
) -> None:
    """Grant a permission to a role."""
    await service.assign_to_role(permission_id, role_id)


@router.delete(
    "/{permission_id}/roles/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Revoke permission from role",
)
@require_permission(MANAGE_PERMISSIONS)
async def revoke_permission(
    permission_id: UUID,
    role_id: UUID,
    service: PermissionSvc,
    current_user_id: CurrentUserId,  # noqa: ARG001
    db: DBSession,  # noqa: ARG001
) -> None:
    """Revoke a permission from a role."""
    await service.remove_from_role(permission_id, role_id)

"""Exceptions raised by the RBAC services and permission guards.

Every exception carries an HTTP status and a machine-readable
``error_code``; the handlers in ``rolegate.core.errors.handlers`` turn
them into RFC 7807 Problem Details responses. The generic classes cover
the HTTP semantics, the role and assignment classes below them name the
preconditions the admin API enforces.
"""

from typing import Any
from uuid import UUID


class AppException(Exception):
    """Base exception for all rolegate errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for clients
        status_code: HTTP status code for the response
        details: Extra members merged into the problem response
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


# ============================================================
# Generic HTTP errors
# ============================================================


class BadRequestError(AppException):
    """Raised when a request is well-formed but cannot be acted on.

    Example:
        raise BadRequestError("No fields to update", error_code="empty_update")
    """

    message = "Bad request"
    error_code = "bad_request"
    status_code = 400


class UnauthorizedError(AppException):
    """Raised when no authenticated identity accompanies the request."""

    message = "Authentication required"
    error_code = "unauthorized"
    status_code = 401


class ForbiddenError(AppException):
    """Raised when the caller is identified but not allowed."""

    message = "Access forbidden"
    error_code = "forbidden"
    status_code = 403


class NotFoundError(AppException):
    """Raised when a user, role, permission or link between them is missing.

    Example:
        raise NotFoundError("Role not found", resource="role", resource_id=str(role_id))
    """

    message = "Resource not found"
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message=message, details=details, **kwargs)


class ConflictError(AppException):
    """Raised when a write would break a uniqueness or integrity rule.

    Example:
        raise ConflictError("Role with this name already exists", error_code="role_exists")
    """

    message = "Resource conflict"
    error_code = "conflict"
    status_code = 409


class ValidationError(AppException):
    """Raised when a field refers to something that does not exist.

    Example:
        raise ValidationError(
            "Parent role not found",
            errors=[{"field": "parent_role_id", "message": "Parent role not found"}],
        )
    """

    message = "Validation error"
    error_code = "validation_error"
    status_code = 422

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if errors:
            details["errors"] = errors
        super().__init__(message=message, details=details, **kwargs)


class ServiceUnavailableError(AppException):
    """Raised when the permission store cannot be reached in time."""

    message = "Service temporarily unavailable"
    error_code = "service_unavailable"
    status_code = 503


# ============================================================
# Access control errors
# ============================================================


class PermissionDeniedError(ForbiddenError):
    """Raised when the caller lacks the permissions a route requires."""

    error_code = "permission_denied"

    def __init__(self, message: str, required_permissions: list[str]) -> None:
        super().__init__(message, details={"required_permissions": required_permissions})


class RoleRequiredError(ForbiddenError):
    """Raised when the caller does not hold a role directly."""

    error_code = "role_required"

    def __init__(self, role_name: str) -> None:
        super().__init__(
            f"Missing required role: {role_name}",
            details={"required_role": role_name},
        )


# ============================================================
# Role and assignment errors
# ============================================================


class RoleInUseError(ConflictError):
    """Raised when deleting a role that users still hold directly."""

    error_code = "role_in_use"

    def __init__(self, role_id: UUID, user_count: int | None = None) -> None:
        details: dict[str, Any] = {"role_id": str(role_id)}
        # Unknown when the database rejected the delete after the count
        if user_count is not None:
            details["user_count"] = user_count
        super().__init__("Cannot delete role with assigned users", details=details)


class RoleHierarchyCycleError(ConflictError):
    """Raised when a parent change would make a role its own ancestor."""

    error_code = "role_hierarchy_cycle"

    def __init__(self, role_id: UUID, parent_role_id: UUID) -> None:
        message = (
            "A role cannot be its own parent"
            if role_id == parent_role_id
            else "Parent role would create a cycle in the role hierarchy"
        )
        super().__init__(
            message,
            details={"role_id": str(role_id), "parent_role_id": str(parent_role_id)},
        )


class RoleAlreadyAssignedError(ConflictError):
    """Raised when a user already holds a role directly."""

    error_code = "role_already_assigned"

    def __init__(self, user_id: UUID, role_id: UUID) -> None:
        super().__init__(
            "User already has this role",
            details={"user_id": str(user_id), "role_id": str(role_id)},
        )


class PermissionAlreadyGrantedError(ConflictError):
    """Raised when a role already holds a permission directly."""

    error_code = "permission_already_granted"

    def __init__(self, role_id: UUID, permission_id: UUID) -> None:
        super().__init__(
            "Role already has this permission",
            details={"role_id": str(role_id), "permission_id": str(permission_id)},
        )

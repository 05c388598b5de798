"""Error handling module with RFC 7807 Problem Details."""

from rolegate.core.errors.exceptions import (
    AppException,
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    PermissionAlreadyGrantedError,
    PermissionDeniedError,
    RoleAlreadyAssignedError,
    RoleHierarchyCycleError,
    RoleInUseError,
    RoleRequiredError,
    ServiceUnavailableError,
    UnauthorizedError,
    ValidationError,
)
from rolegate.core.errors.handlers import (
    FieldError,
    ProblemDetail,
    register_exception_handlers,
)


__all__ = [
    # Exceptions
    "AppException",
    "BadRequestError",
    "ConflictError",
    # Handlers
    "FieldError",
    "ForbiddenError",
    "NotFoundError",
    "PermissionAlreadyGrantedError",
    "PermissionDeniedError",
    "ProblemDetail",
    "RoleAlreadyAssignedError",
    "RoleHierarchyCycleError",
    "RoleInUseError",
    "RoleRequiredError",
    "ServiceUnavailableError",
    "UnauthorizedError",
    "ValidationError",
    "register_exception_handlers",
]

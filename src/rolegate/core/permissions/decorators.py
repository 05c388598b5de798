"""Permission decorators for route protection.

This module provides decorators that can be applied to FastAPI
routes to require specific permissions or a directly assigned role.

Decorated routes must declare ``current_user_id: CurrentUserId`` and
``db: DBSession`` parameters; the decorators read both from the
handler's keyword arguments. Checks fail closed: if the permission
store raises, the error propagates and the route body never runs.
"""

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar, cast
from uuid import UUID

import structlog

from rolegate.core.errors import (
    ForbiddenError,
    PermissionDeniedError,
    RoleRequiredError,
    UnauthorizedError,
)
from rolegate.core.permissions.evaluator import AccessEvaluator
from rolegate.core.permissions.store import SQLAlchemyPermissionStore


if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


logger = structlog.get_logger()

P = ParamSpec("P")
R = TypeVar("R")


def _get_evaluator(kwargs: dict[str, Any]) -> tuple[UUID, AccessEvaluator]:
    """Extract the caller id and build an evaluator from kwargs.

    Args:
        kwargs: Function keyword arguments

    Returns:
        Tuple of (user_id, evaluator)

    Raises:
        UnauthorizedError: If no caller id was injected
        ForbiddenError: If no database session was injected
    """
    user_id = cast("UUID | None", kwargs.get("current_user_id"))
    db = cast("AsyncSession | None", kwargs.get("db"))

    if user_id is None:
        raise UnauthorizedError(
            "Authentication required",
            error_code="auth_required",
        )

    if db is None:
        raise ForbiddenError(
            "Permission check failed",
            error_code="permission_check_failed",
        )

    return user_id, AccessEvaluator(SQLAlchemyPermissionStore(db))


def require_permission(
    code: str,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator that requires a specific permission to access a route.

    Usage:
        @router.delete("/roles/{role_id}")
        @require_permission("manage_roles")
        async def delete_role(role_id: UUID, current_user_id: CurrentUserId, db: DBSession):
            ...

    Args:
        code: The permission code required

    Returns:
        Decorator function

    Raises:
        PermissionDeniedError: If user lacks the required permission
    """
    return require_all_permissions([code])


def require_any_permission(
    codes: list[str],
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator that requires any one of the specified permissions.

    An empty list places no requirement on the caller.

    Usage:
        @router.get("/admin")
        @require_any_permission(["manage_users", "manage_roles"])
        async def admin_home(current_user_id: CurrentUserId, db: DBSession):
            ...

    Args:
        codes: Permission codes of which one suffices

    Returns:
        Decorator function
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            user_id, evaluator = _get_evaluator(kwargs)

            if not await evaluator.check_any_access(user_id, codes):
                logger.info(
                    "permission_denied",
                    user_id=str(user_id),
                    required_any=codes,
                )
                raise PermissionDeniedError(
                    f"Missing required permission. Need one of: {', '.join(codes)}",
                    required_permissions=codes,
                )

            return await func(*args, **kwargs)

        return wrapper

    return decorator


def require_all_permissions(
    codes: list[str],
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator that requires all of the specified permissions.

    Usage:
        @router.post("/sensitive-operation")
        @require_all_permissions(["manage_roles", "manage_permissions"])
        async def sensitive_operation(current_user_id: CurrentUserId, db: DBSession):
            ...

    Args:
        codes: Permission codes that are all required

    Returns:
        Decorator function
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            user_id, evaluator = _get_evaluator(kwargs)

            if not await evaluator.check_access(user_id, codes):
                logger.info(
                    "permission_denied",
                    user_id=str(user_id),
                    required_all=codes,
                )
                raise PermissionDeniedError(
                    f"Missing required permissions: {', '.join(codes)}",
                    required_permissions=codes,
                )

            return await func(*args, **kwargs)

        return wrapper

    return decorator


def require_role(
    role_name: str,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator that requires a directly assigned role.

    Inherited roles do not satisfy it.

    Usage:
        @router.get("/moderation")
        @require_role("moderator")
        async def moderation_queue(current_user_id: CurrentUserId, db: DBSession):
            ...

    Args:
        role_name: The exact role name required

    Returns:
        Decorator function
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            user_id, evaluator = _get_evaluator(kwargs)

            if not await evaluator.has_role(user_id, role_name):
                logger.info(
                    "role_denied",
                    user_id=str(user_id),
                    required_role=role_name,
                )
                raise RoleRequiredError(role_name)

            return await func(*args, **kwargs)

        return wrapper

    return decorator

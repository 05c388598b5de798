"""FastAPI dependencies for the caller's identity.

Route handlers never read ambient session state. They receive the
authenticated user id as an explicit parameter through ``CurrentUserId``
and pass it down to the access evaluator.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Request

from rolegate.core.errors import UnauthorizedError


async def get_current_user_id(request: Request) -> UUID:
    """Get the id of the authenticated caller.

    Args:
        request: The incoming request

    Returns:
        The user id placed on the request by IdentityMiddleware

    Raises:
        UnauthorizedError: If the request carries no identity
    """
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        raise UnauthorizedError(
            "Missing user identity",
            error_code="missing_identity",
        )
    return user_id


CurrentUserId = Annotated[UUID, Depends(get_current_user_id)]

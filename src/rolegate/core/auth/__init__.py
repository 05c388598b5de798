"""Caller identity: trusted-header middleware and dependencies."""

from rolegate.core.auth.dependencies import CurrentUserId, get_current_user_id
from rolegate.core.auth.middleware import IdentityMiddleware, RequestIdMiddleware


__all__ = [
    "CurrentUserId",
    "IdentityMiddleware",
    "RequestIdMiddleware",
    "get_current_user_id",
]

"""Users module - user listing, role assignment and access inspection."""

from fastapi import APIRouter


router = APIRouter(prefix="/users", tags=["users"])

from rolegate.modules.users import routes  # noqa: E402, F401

"""Permissions module - permission CRUD and role grants."""

from fastapi import APIRouter


router = APIRouter(prefix="/permissions", tags=["permissions"])

from rolegate.modules.permissions import routes  # noqa: E402, F401

"""Roles module - role CRUD and hierarchy management."""

from fastapi import APIRouter


router = APIRouter(prefix="/roles", tags=["roles"])

from rolegate.modules.roles import routes  # noqa: E402, F401

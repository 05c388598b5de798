"""Root API router: health probes plus the versioned module routers."""

from fastapi import APIRouter

from rolegate.api import health
from rolegate.modules import discover_modules


# Every module router lives under /api/v1
v1_router = APIRouter(prefix="/api/v1")
for module_router in discover_modules():
    v1_router.include_router(module_router)

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(v1_router)

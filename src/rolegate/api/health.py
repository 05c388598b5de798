"""Liveness, readiness and info endpoints.

Mounted at the root rather than under ``/api/v1`` so probes keep working
across API versions. None of them require an identity.
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from rolegate import __version__
from rolegate.api.dependencies import DBSession
from rolegate.config import settings


class HealthResponse(BaseModel):
    """Liveness response."""

    status: str


class ReadinessResponse(BaseModel):
    """Readiness response with one entry per dependency checked."""

    status: str
    checks: dict[str, str]


class InfoResponse(BaseModel):
    """Application metadata."""

    app: str
    version: str
    environment: str
    debug: bool
    identity_header: str


router = APIRouter(tags=["health"])


@router.get(
    "/health/live",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Returns 200 while the process is running.",
)
async def liveness() -> HealthResponse:
    """Liveness probe endpoint."""
    return HealthResponse(status="alive")


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Returns 503 while the permission store is unreachable.",
)
async def readiness(db: DBSession) -> JSONResponse:
    """Readiness probe endpoint."""
    try:
        await db.execute(text("SELECT 1"))
        database = "ok"
    except (SQLAlchemyError, OSError, TimeoutError) as e:
        database = str(e)

    ready = database == "ok"
    body = ReadinessResponse(
        status="ready" if ready else "degraded",
        checks={"database": database},
    )
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=body.model_dump(),
    )


@router.get(
    "/info",
    response_model=InfoResponse,
    summary="Application info",
)
async def info() -> InfoResponse:
    """Application info endpoint."""
    return InfoResponse(
        app=settings.app_name,
        version=__version__,
        environment=settings.environment,
        debug=settings.debug,
        identity_header=settings.identity_header,
    )

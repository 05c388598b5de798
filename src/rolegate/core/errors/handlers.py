"""RFC 7807 Problem Details exception handlers.

Every error response shares one shape: ``type`` is a URI ending in the
error code, ``title`` and ``detail`` describe it, and any details carried
by the exception are merged in as extra members (for example
``required_permissions`` on a 403 or ``user_count`` on ``role_in_use``).

See: https://tools.ietf.org/html/rfc7807
"""

from typing import TYPE_CHECKING, Any, cast

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import OperationalError

from rolegate.config import settings
from rolegate.core.errors.exceptions import AppException, ServiceUnavailableError


if TYPE_CHECKING:
    from starlette.types import ExceptionHandler


logger = structlog.get_logger()


class FieldError(BaseModel):
    """Represents a single field validation error."""

    field: str
    message: str
    type: str | None = None


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details response schema.

    Attributes:
        type: URI whose last segment is the error code
        title: Short human-readable summary
        status: HTTP status code
        detail: Human-readable explanation specific to this occurrence
        instance: Request path that failed
        errors: Field-level errors, for validation failures
        trace_id: Request ID for correlating with logs
    """

    type: str
    title: str
    status: int
    detail: str
    instance: str | None = None
    errors: list[FieldError] | None = None
    trace_id: str | None = None

    model_config = {"extra": "allow"}


def _problem_response(
    request: Request,
    status_code: int,
    error_code: str,
    detail: str,
    *,
    title: str | None = None,
    errors: list[FieldError] | None = None,
    extra: dict[str, Any] | None = None,
) -> JSONResponse:
    """Build a Problem Details response for the current request."""
    content = ProblemDetail(
        type=f"{settings.api_docs_base_url}/errors/{error_code}",
        title=title or error_code.replace("_", " ").title(),
        status=status_code,
        detail=detail,
        instance=str(request.url.path),
        errors=errors,
        trace_id=getattr(request.state, "trace_id", None),
    ).model_dump(exclude_none=True)

    # Standard members win over exception details with the same name
    for key, value in (extra or {}).items():
        content.setdefault(key, value)

    return JSONResponse(status_code=status_code, content=content)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Convert an AppException into a Problem Details response."""
    logger.warning(
        "app_exception",
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        path=str(request.url.path),
        details=exc.details,
    )

    return _problem_response(
        request,
        exc.status_code,
        exc.error_code,
        exc.message,
        extra=exc.details,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Convert request validation failures into field-level errors."""
    errors = [
        FieldError(
            # Drop the "body"/"query" prefix from the location
            field=".".join(str(part) for part in error.get("loc", ())[1:]) or "unknown",
            message=error.get("msg", "Invalid value"),
            type=error.get("type"),
        )
        for error in exc.errors()
    ]

    logger.warning(
        "validation_error",
        path=str(request.url.path),
        error_count=len(errors),
    )

    return _problem_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "validation_error",
        "Request validation failed",
        errors=errors,
    )


async def store_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle database connectivity failures and timeouts.

    Permission checks that could not complete end here, so the caller
    sees a 503 instead of an allow or an empty permission set.
    """
    logger.error(
        "store_unavailable",
        path=str(request.url.path),
        error_type=type(exc).__name__,
    )

    return await app_exception_handler(
        request,
        ServiceUnavailableError("The permission store is temporarily unavailable"),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions.

    The error is logged with its traceback; the client only sees a
    generic 500.
    """
    logger.exception(
        "unhandled_exception",
        path=str(request.url.path),
        error_type=type(exc).__name__,
    )

    return _problem_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        "An unexpected error occurred",
        title="Internal Server Error",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Store failures have their own handlers so they map to 503 rather
    than 500.
    """
    app.add_exception_handler(
        AppException, cast("ExceptionHandler", app_exception_handler)
    )
    app.add_exception_handler(
        RequestValidationError, cast("ExceptionHandler", validation_exception_handler)
    )
    app.add_exception_handler(OperationalError, store_unavailable_handler)
    app.add_exception_handler(TimeoutError, store_unavailable_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

"""Request logging middleware.

One structured ``request_completed`` event is written per request. Access
failures are tagged so denied and unauthenticated calls can be filtered
out of the log stream without parsing status codes.
"""

import time
from typing import Any

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint


logger = structlog.get_logger()

DEFAULT_EXCLUDE_PATHS = (
    "/health/live",
    "/health/ready",
    "/docs",
    "/redoc",
    "/openapi.json",
)

# Status codes that mean the access layer turned the caller away
ACCESS_OUTCOMES = {
    401: "unauthenticated",
    403: "denied",
}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that logs every request with its outcome and duration.

    The event carries the method, path, status, duration, request id and,
    when IdentityMiddleware resolved one, the caller's user id. 5xx
    responses log at error level, other 4xx at warning, the rest at info.
    """

    def __init__(
        self,
        app: Any,
        exclude_paths: tuple[str, ...] = DEFAULT_EXCLUDE_PATHS,
    ) -> None:
        super().__init__(app)
        self.exclude_paths = exclude_paths

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process the request and log its outcome.

        Args:
            request: The incoming request
            call_next: The next middleware/handler

        Returns:
            The response from the handler
        """
        path = request.url.path
        if path.startswith(self.exclude_paths):
            return await call_next(request)

        started = time.perf_counter()
        event: dict[str, Any] = {"method": request.method, "path": path}
        if request.url.query:
            event["query"] = request.url.query

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request_failed",
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
                **event,
            )
            raise

        event["status_code"] = response.status_code
        event["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)

        request_id = getattr(request.state, "request_id", None)
        if request_id:
            event["request_id"] = request_id

        user_id = getattr(request.state, "user_id", None)
        if user_id:
            event["user_id"] = str(user_id)

        access = ACCESS_OUTCOMES.get(response.status_code)
        if access:
            event["access"] = access

        if response.status_code >= 500:
            logger.error("request_completed", **event)
        elif response.status_code >= 400:
            logger.warning("request_completed", **event)
        else:
            logger.info("request_completed", **event)

        return response

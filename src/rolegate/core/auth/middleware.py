"""Identity and request tracing middleware.

This module provides middleware for:
- Carrying the authenticated user id from the upstream gateway into requests
- Request tracing with unique IDs
"""

import uuid
from typing import TYPE_CHECKING

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from rolegate.config import settings
from rolegate.core.constants import REQUEST_ID_HEADER


if TYPE_CHECKING:
    from starlette.types import ASGIApp


logger = structlog.get_logger()


class IdentityMiddleware(BaseHTTPMiddleware):
    """Middleware that exposes the authenticated user id to handlers.

    Session issuance lives in the upstream gateway. Once it has
    authenticated the caller it forwards the user id in a trusted header
    (``settings.identity_header``). This middleware parses that header and
    stores the id on ``request.state.user_id``. A malformed value is
    dropped, which leaves the request unauthenticated.

    Attributes:
        header_name: Name of the trusted identity header
    """

    def __init__(
        self,
        app: "ASGIApp",
        header_name: str | None = None,
    ) -> None:
        super().__init__(app)
        self.header_name = header_name or settings.identity_header

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process the request and inject the user id.

        Args:
            request: The incoming request
            call_next: The next middleware/handler

        Returns:
            The response from the handler
        """
        raw_user_id = request.headers.get(self.header_name)
        if raw_user_id:
            try:
                user_id = uuid.UUID(raw_user_id)
            except ValueError:
                logger.warning(
                    "invalid_identity_header",
                    header=self.header_name,
                    path=request.url.path,
                )
            else:
                request.state.user_id = user_id
                structlog.contextvars.bind_contextvars(user_id=str(user_id))

        return await call_next(request)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Middleware that adds a unique request ID to each request.

    The request ID is added to:
    - request.state.request_id
    - Response header X-Request-ID
    - Structlog context
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process the request and add request ID.

        Args:
            request: The incoming request
            call_next: The next middleware/handler

        Returns:
            The response with X-Request-ID header
        """
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        request.state.request_id = request_id
        request.state.trace_id = request_id  # Alias for error handler

        structlog.contextvars.bind_contextvars(request_id=request_id)

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id

        structlog.contextvars.unbind_contextvars("request_id", "user_id")

        return response

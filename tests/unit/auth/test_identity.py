"""Unit tests for caller identity handling."""

from types import SimpleNamespace
from uuid import uuid4

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from rolegate.core.auth import IdentityMiddleware, get_current_user_id
from rolegate.core.errors import UnauthorizedError


pytestmark = pytest.mark.unit


class TestGetCurrentUserId:
    """Tests for the get_current_user_id dependency."""

    async def test_returns_user_id(self) -> None:
        """Test the id set by the middleware is returned."""
        user_id = uuid4()
        request = SimpleNamespace(state=SimpleNamespace(user_id=user_id))

        assert await get_current_user_id(request) == user_id

    async def test_missing_identity(self) -> None:
        """Test a request without identity raises UnauthorizedError."""
        request = SimpleNamespace(state=SimpleNamespace())

        with pytest.raises(UnauthorizedError) as exc_info:
            await get_current_user_id(request)

        assert exc_info.value.error_code == "missing_identity"


class TestIdentityMiddleware:
    """Tests for IdentityMiddleware."""

    @pytest.fixture
    async def client(self) -> AsyncClient:
        """Client for a bare app echoing the parsed identity."""
        app = FastAPI()
        app.add_middleware(IdentityMiddleware, header_name="X-Forwarded-User")

        @app.get("/whoami")
        async def whoami(request: Request) -> dict:
            user_id = getattr(request.state, "user_id", None)
            return {"user_id": str(user_id) if user_id else None}

        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as client:
            yield client

    async def test_valid_header(self, client: AsyncClient) -> None:
        """Test a UUID in the configured header becomes the identity."""
        user_id = uuid4()

        response = await client.get("/whoami", headers={"X-Forwarded-User": str(user_id)})

        assert response.json()["user_id"] == str(user_id)

    async def test_malformed_header(self, client: AsyncClient) -> None:
        """Test a value that is not a UUID is ignored."""
        response = await client.get("/whoami", headers={"X-Forwarded-User": "admin"})

        assert response.json()["user_id"] is None

    async def test_other_header_ignored(self, client: AsyncClient) -> None:
        """Test only the configured header is trusted."""
        response = await client.get("/whoami", headers={"X-User-ID": str(uuid4())})

        assert response.json()["user_id"] is None

"""Shared helpers and fixture type aliases for tests."""

import os
from collections.abc import Awaitable, Callable
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from rolegate.config import settings
from rolegate.core.permissions.models import Role, UserRole
from rolegate.modules.users.models import User


# Defaults to an in-memory SQLite database; point it at PostgreSQL
# (postgresql+asyncpg://...) to run the same suite against asyncpg.
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

CreateUser = Callable[..., Awaitable[User]]
CreateRole = Callable[..., Awaitable[Role]]
AssignRole = Callable[[User, Role], Awaitable[UserRole]]


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    """Turn on FK enforcement so ON DELETE rules behave as in PostgreSQL."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_test_engine(url: str = TEST_DATABASE_URL) -> AsyncEngine:
    """Create an engine for tests, with FK enforcement on SQLite."""
    if url.startswith("sqlite"):
        engine = create_async_engine(
            url,
            poolclass=StaticPool if ":memory:" in url else NullPool,
            connect_args={"check_same_thread": False},
        )
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_async_engine(url, poolclass=NullPool)


def identity_headers(user: User) -> dict[str, str]:
    """Headers the upstream gateway would set for an authenticated user."""
    return {settings.identity_header: str(user.id)}


def error_code(response_json: dict) -> str:
    """Extract the error code from a Problem Details ``type`` URI."""
    return response_json["type"].rsplit("/", 1)[-1]

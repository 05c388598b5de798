"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator, Iterable
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from rolegate.core.constants import MANAGE_PERMISSIONS, MANAGE_ROLES, MANAGE_USERS
from rolegate.core.database import Base, get_db
from rolegate.core.permissions.models import Permission, Role, RolePermission, UserRole
from rolegate.main import create_app
from rolegate.modules.users.models import User
from tests.factories.user import UserFactory
from tests.helpers import (
    AssignRole,
    CreateRole,
    CreateUser,
    create_test_engine,
    identity_headers,
)


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine."""
    engine = create_test_engine()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a transactional database session for tests.

    Each test runs in its own transaction that is rolled back
    after the test completes, ensuring test isolation.
    """
    session_factory = async_sessionmaker(
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with engine.connect() as conn:
        await conn.begin()

        async with session_factory(bind=conn) as session:
            yield session

        await conn.rollback()


@pytest.fixture
async def app(db: AsyncSession) -> AsyncGenerator[FastAPI, None]:
    """Create test application instance."""
    application = create_app()

    # Override database dependency
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    application.dependency_overrides[get_db] = override_get_db

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client with no identity header."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


# ============================================================
# User and RBAC Fixtures
# ============================================================


@pytest.fixture
def create_user(db: AsyncSession) -> CreateUser:
    """Factory fixture persisting users."""

    async def _create(**kwargs: Any) -> User:
        user = UserFactory.build(**kwargs)
        db.add(user)
        await db.flush()
        return user

    return _create


@pytest.fixture
def create_role(db: AsyncSession) -> CreateRole:
    """Factory fixture persisting a role with directly granted codes.

    Permissions that do not exist yet are created on the fly.
    """

    async def _create(
        name: str,
        codes: Iterable[str] = (),
        parent: Role | None = None,
        description: str | None = None,
    ) -> Role:
        role = Role(
            name=name,
            description=description,
            parent_role_id=parent.id if parent else None,
        )
        db.add(role)
        await db.flush()

        for code in codes:
            result = await db.execute(select(Permission).where(Permission.code == code))
            permission = result.scalar_one_or_none()
            if permission is None:
                permission = Permission(code=code)
                db.add(permission)
                await db.flush()
            db.add(RolePermission(role_id=role.id, permission_id=permission.id))

        await db.flush()
        return role

    return _create


@pytest.fixture
def assign_role(db: AsyncSession) -> AssignRole:
    """Factory fixture assigning a role directly to a user."""

    async def _assign(user: User, role: Role) -> UserRole:
        assignment = UserRole(user_id=user.id, role_id=role.id)
        db.add(assignment)
        await db.flush()
        return assignment

    return _assign


@pytest.fixture
async def admin_role(create_role: CreateRole) -> Role:
    """Role holding every admin-surface permission."""
    return await create_role(
        "admin",
        codes=[MANAGE_USERS, MANAGE_ROLES, MANAGE_PERMISSIONS],
    )


@pytest.fixture
async def admin(create_user: CreateUser, assign_role: AssignRole, admin_role: Role) -> User:
    """A user directly assigned the admin role."""
    user = await create_user(email="admin@example.com")
    await assign_role(user, admin_role)
    return user


@pytest.fixture
async def admin_client(app: FastAPI, admin: User) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client authenticated as the admin user."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=identity_headers(admin),
    ) as client:
        yield client


@pytest.fixture
async def member(create_user: CreateUser) -> User:
    """A user with no roles."""
    return await create_user(email="member@example.com")


@pytest.fixture
async def member_client(app: FastAPI, member: User) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client authenticated as a user without roles."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=identity_headers(member),
    ) as client:
        yield client

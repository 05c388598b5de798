"""Engine and session wiring for the permission store.

One engine is built from settings at import time. The API takes a session
per request through ``get_db``; CLI commands open their own from
``async_session_factory`` and dispose of the engine when done.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from rolegate.config import Settings, settings


def build_engine(config: Settings) -> AsyncEngine:
    """Create the async engine described by ``config``.

    Pooled connections are pinged before use, so a database restart
    surfaces as a fresh connection rather than a failed permission check.
    """
    return create_async_engine(
        config.async_database_url,
        pool_size=config.database_pool_size,
        max_overflow=config.database_max_overflow,
        echo=config.database_echo,
        pool_pre_ping=True,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to ``engine``.

    Objects stay usable after commit and nothing is flushed implicitly;
    repositories flush when they need generated values or constraint checks.
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async_engine = build_engine(settings)
async_session_factory = build_session_factory(async_engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a request-scoped session.

    The transaction commits when the route returns and rolls back when it
    raises, including the access errors raised by the permission guards.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

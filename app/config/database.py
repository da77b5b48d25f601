"""
Database configuration.

Async SQLAlchemy engine and session factory.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.config.settings import settings


def create_engine(database_url: str | None = None, **kwargs) -> AsyncEngine:
    """
    Create async engine.

    Args:
        database_url: Override for settings.database_url
        **kwargs: Extra engine options

    Returns:
        AsyncEngine (no connection is opened until first use)
    """
    options = {
        "echo": settings.database_echo,
        "pool_pre_ping": True,
    }
    options.update(kwargs)
    return create_async_engine(database_url or settings.database_url, **options)


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session maker bound to engine."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async_engine = create_engine()
async_session_maker = create_session_maker(async_engine)

"""SQLAlchemy async session setup for the assessment store.

Provides:
- Base: DeclarativeBase for all ORM models
- engine: async engine configured from settings
- async_session_factory: session maker bound to engine
- create_all_tables: idempotent schema bootstrap run at application startup
- get_async_session: FastAPI dependency with Unit-of-Work commit/rollback

There are no migrations. Tables are created from the ORM metadata when
missing; existing tables are left untouched.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.config.settings import LogLevel, get_settings


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""

    pass


_settings = get_settings()

engine = create_async_engine(
    _settings.DATABASE_URL,
    echo=(_settings.LOG_LEVEL == LogLevel.DEBUG),
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def create_all_tables(bind: AsyncEngine | None = None) -> None:
    """Create every registered table that does not exist yet."""
    import src.db.tables  # noqa: F401 — register ORM models on Base.metadata

    target = bind if bind is not None else engine
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session with Unit-of-Work semantics.

    Repositories only call add()/flush()/refresh().
    Commit happens once at the end of a successful request.
    Rollback happens on any exception.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

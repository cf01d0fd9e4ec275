"""Database engine and session factory."""

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from patient_service.db.base import Base


def get_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine.

    pool_pre_ping makes stale connections surface as a fresh connect attempt
    instead of an error on the first query.
    """
    return create_async_engine(database_url, echo=echo, pool_pre_ping=True)


def get_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Create a session factory with explicit transaction control."""
    return async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

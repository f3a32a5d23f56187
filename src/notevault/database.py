# Database connection setup
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from .config import Settings
from .core.models.base import BaseModel


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for ``settings.database_url``."""
    kwargs = {"echo": settings.database_echo}
    if settings.is_sqlite and ":memory:" in settings.database_url:
        # one shared connection, otherwise every session sees its own empty db
        kwargs.update(poolclass=StaticPool, connect_args={"check_same_thread": False})

    engine = create_async_engine(settings.database_url, **kwargs)

    if settings.is_sqlite:
        # sqlite leaves foreign keys off unless asked, and cascades depend on them
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Session factory"""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables."""
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)


async def get_db_session(request: Request) -> AsyncIterator[AsyncSession]:
    """Get database session from the app's context."""
    async with request.app.state.context.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()

"""Process-wide service wiring.

One ``ServiceContext`` is built per application and stored on
``app.state.context``. Request handlers reach their collaborators through it
instead of module globals, so tests can build as many independent apps as
they like.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from .config import Settings
from .core.search import SearchIndex
from .core.search.redis_index import RedisSearchIndex
from .core.search.sql_index import SqlSearchIndex
from .core.services import AuthService, HealthService, NoteService, SearchService, SessionService
from .database import create_engine, create_session_factory, create_tables
from .security import PasswordHasher, TokenCodec

logger = logging.getLogger(__name__)


@dataclass
class ServiceContext:
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker
    password_hasher: PasswordHasher
    sessions: SessionService
    search_index: SearchIndex

    def search_service(self, session: AsyncSession) -> SearchService:
        return SearchService(session, self.search_index)

    def note_service(self, session: AsyncSession) -> NoteService:
        return NoteService(session, self.search_service(session))

    def auth_service(self, session: AsyncSession) -> AuthService:
        return AuthService(session, self.password_hasher, self.sessions)

    def health_service(self, session: AsyncSession) -> HealthService:
        return HealthService(session, self.search_index, self.settings.app_version)

    async def startup(self) -> None:
        """Create tables and make sure the search index is usable.

        An unusable search index is fatal: the app must not serve writes it
        cannot index.
        """
        await create_tables(self.engine)
        logger.info("Database tables created/verified")

        await self.search_index.ensure()

        if self.settings.search_rebuild_on_startup:
            async with self.session_factory() as session:
                await self.search_service(session).rebuild_index()

    async def shutdown(self) -> None:
        await self.search_index.close()
        await self.engine.dispose()
        logger.info("Service context closed")


def build_search_index(settings: Settings, engine: AsyncEngine) -> SearchIndex:
    if settings.search_backend == "redis":
        return RedisSearchIndex(
            settings.redis_url,
            max_connections=settings.redis_max_connections,
            min_token_length=settings.search_min_token_length,
        )
    return SqlSearchIndex(engine, min_token_length=settings.search_min_token_length)


def build_context(settings: Settings) -> ServiceContext:
    """Wire every collaborator from ``settings``. Nothing connects until ``startup``."""
    engine = create_engine(settings)
    codec = TokenCodec(settings.secret_key, settings.algorithm)
    return ServiceContext(
        settings=settings,
        engine=engine,
        session_factory=create_session_factory(engine),
        password_hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
        sessions=SessionService(codec, timedelta(minutes=settings.access_token_expire_minutes)),
        search_index=build_search_index(settings, engine),
    )

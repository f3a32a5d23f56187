"""Shared dependencies for the API routers."""

from uuid import UUID

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..context import ServiceContext
from ..core.exceptions import NotFoundError
from ..core.services import AuthService, HealthService, NoteService, SearchService
from ..database import get_db_session


def get_context(request: Request) -> ServiceContext:
    return request.app.state.context


def parse_note_id(note_id: str) -> UUID:
    """Path note id. One that is not a UUID names no note."""
    try:
        return UUID(note_id)
    except ValueError as e:
        raise NotFoundError() from e


async def get_auth_service(
    context: ServiceContext = Depends(get_context),
    session: AsyncSession = Depends(get_db_session),
) -> AuthService:
    return context.auth_service(session)


async def get_note_service(
    context: ServiceContext = Depends(get_context),
    session: AsyncSession = Depends(get_db_session),
) -> NoteService:
    return context.note_service(session)


async def get_search_service(
    context: ServiceContext = Depends(get_context),
    session: AsyncSession = Depends(get_db_session),
) -> SearchService:
    return context.search_service(session)


async def get_health_service(
    context: ServiceContext = Depends(get_context),
    session: AsyncSession = Depends(get_db_session),
) -> HealthService:
    return context.health_service(session)

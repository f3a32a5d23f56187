"""Search index stored in the application database."""

import logging
from typing import Dict, Iterable, List
from uuid import UUID

from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from ..models.search_term import SearchTerm
from .base import SearchDocument, SearchIndex, SearchIndexError

logger = logging.getLogger(__name__)


class SqlSearchIndex(SearchIndex):
    """Inverted index in the ``search_terms`` table.

    Note writes stage their terms through the note's own session, so the
    terms commit or roll back with the note and concurrent writers reach the
    index in the same order they reach the note row. ``index`` and ``remove``
    open their own transaction and serve rebuilds.
    """

    backend = "database"
    transactional = True

    def __init__(self, engine: AsyncEngine, min_token_length: int = 2):
        super().__init__(min_token_length)
        self.engine = engine

    async def ensure(self) -> None:
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(
                    lambda sync_conn: SearchTerm.__table__.create(sync_conn, checkfirst=True)
                )
                await conn.execute(select(SearchTerm.id).limit(1))
        except SQLAlchemyError as e:
            raise SearchIndexError("search_terms table is not available") from e
        logger.info("Search index ready", extra={"backend": self.backend})

    @staticmethod
    def _rows(document: SearchDocument) -> List[dict]:
        return [
            {"note_id": document.note_id, "term": term, "field": field}
            for field, terms in document.terms.items()
            for term in terms
        ]

    async def stage(self, session: AsyncSession, document: SearchDocument) -> None:
        rows = self._rows(document)
        try:
            await session.execute(delete(SearchTerm).where(SearchTerm.note_id == document.note_id))
            if rows:
                await session.execute(insert(SearchTerm.__table__), rows)
        except SQLAlchemyError as e:
            raise SearchIndexError(f"Failed to index note {document.note_id}") from e
        logger.debug(f"Staged {len(rows)} terms for note {document.note_id}")

    async def unstage(self, session: AsyncSession, note_id: UUID) -> None:
        try:
            await session.execute(delete(SearchTerm).where(SearchTerm.note_id == note_id))
        except SQLAlchemyError as e:
            raise SearchIndexError(f"Failed to remove note {note_id}") from e

    async def index(self, document: SearchDocument) -> None:
        rows = self._rows(document)
        try:
            async with self.engine.begin() as conn:
                await conn.execute(delete(SearchTerm).where(SearchTerm.note_id == document.note_id))
                if rows:
                    await conn.execute(insert(SearchTerm), rows)
        except SQLAlchemyError as e:
            raise SearchIndexError(f"Failed to index note {document.note_id}") from e
        logger.debug(f"Indexed note {document.note_id} with {len(rows)} terms")

    async def remove(self, note_id: UUID) -> None:
        try:
            async with self.engine.begin() as conn:
                await conn.execute(delete(SearchTerm).where(SearchTerm.note_id == note_id))
        except SQLAlchemyError as e:
            raise SearchIndexError(f"Failed to remove note {note_id}") from e

    async def match(self, tokens: Iterable[str]) -> Dict[UUID, int]:
        tokens = list(tokens)
        if not tokens:
            return {}
        stmt = (
            select(SearchTerm.note_id, func.count(SearchTerm.term.distinct()))
            .where(SearchTerm.term.in_(tokens))
            .group_by(SearchTerm.note_id)
        )
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(stmt)
                return {note_id: hits for note_id, hits in result.all()}
        except SQLAlchemyError as e:
            raise SearchIndexError("Search query failed") from e

    async def clear(self) -> None:
        try:
            async with self.engine.begin() as conn:
                await conn.execute(delete(SearchTerm))
        except SQLAlchemyError as e:
            raise SearchIndexError("Failed to clear search index") from e

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(select(func.count()).select_from(SearchTerm.__table__))
            return True
        except SQLAlchemyError:
            return False

"""Search service implementation."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import BadRequestError, InternalError
from ..models.note import Note
from ..repositories.note_repository import NoteRepository
from ..schemas.notes import NoteResponse
from ..search import SearchDocument, SearchIndex, SearchIndexError, build_document, tokenize
from .interfaces import ISearchService

logger = logging.getLogger(__name__)


class SearchService(ISearchService):
    """Keyword search over the notes a principal can read.

    The index answers "which notes contain these tokens"; the access filter
    is applied afterwards against the note store, so the index never decides
    who may see what.
    """

    def __init__(self, session: AsyncSession, index: SearchIndex):
        self.session = session
        self.note_repo = NoteRepository(session)
        self.index = index

    async def search_notes(self, principal_id: UUID, query: Optional[str]) -> List[NoteResponse]:
        """Notes readable by the principal matching any token of ``query``.

        Results with more matched tokens come first, ties broken by most
        recent update.
        """
        if query is None or not query.strip():
            raise BadRequestError("Search query must not be empty")

        tokens = tokenize(query, self.index.min_token_length)
        if not tokens:
            return []

        try:
            hits = await self.index.match(tokens)
        except SearchIndexError as e:
            logger.error(f"Search index query failed: {e}")
            raise InternalError("Search is unavailable") from e

        if not hits:
            return []

        notes = await self.note_repo.list_readable(principal_id, hits.keys())
        notes.sort(key=lambda n: (hits[n.id], n.updated_at), reverse=True)
        return [NoteResponse.from_note(note) for note in notes]

    def _document(self, note: Note) -> SearchDocument:
        return build_document(note.id, note.title, note.content, self.index.min_token_length)

    async def stage_note(self, note: Note) -> None:
        """Write the note's terms inside the transaction that is saving it."""
        if not self.index.transactional:
            return
        try:
            await self.index.stage(self.session, self._document(note))
        except SearchIndexError as e:
            logger.error(f"Note {note.id} not saved, indexing failed: {e}")
            raise InternalError("Search index update failed") from e

    async def stage_removal(self, note_id: UUID) -> None:
        """Drop the note's terms inside the transaction that is deleting it."""
        if not self.index.transactional:
            return
        try:
            await self.index.unstage(self.session, note_id)
        except SearchIndexError as e:
            logger.error(f"Note {note_id} not deleted, unindexing failed: {e}")
            raise InternalError("Search index update failed") from e

    async def sync_note(self, note_id: UUID) -> None:
        """Bring an external index in line with the committed note.

        The note is read back from the store rather than taken from the
        caller, so a writer that commits first but indexes last cannot leave
        its superseded content behind.
        """
        if self.index.transactional:
            return

        async def load():
            note = await self.note_repo.get_by_id(note_id)
            return None if note is None else self._document(note)

        try:
            await self.index.refresh(note_id, load)
        except SearchIndexError as e:
            logger.error(f"Note {note_id} stored but index not updated: {e}")
            raise InternalError("Note saved but search index update failed") from e

    async def rebuild_index(self) -> int:
        """Drop the index and reindex every stored note."""
        notes = await self.note_repo.list_all()
        try:
            await self.index.clear()
            for note in notes:
                await self.index.index(self._document(note))
        except SearchIndexError as e:
            raise InternalError("Search index rebuild failed") from e

        logger.info(f"Rebuilt search index with {len(notes)} notes")
        return len(notes)

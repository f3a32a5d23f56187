"""Note service implementation."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import NotFoundError, ValidationError
from ..models.note import Note
from ..repositories.account_repository import AccountRepository
from ..repositories.note_repository import NoteRepository
from ..schemas.notes import NoteCreate, NoteResponse, NoteUpdate
from ..schemas.sharing import ShareRequest
from .interfaces import INoteService, ISearchService

logger = logging.getLogger(__name__)


class NoteService(INoteService):
    """Note service implementation.

    Every lookup is scoped to the principal. A note the principal may not
    read, or may not modify, is reported exactly like a note that does not
    exist, so callers cannot discover other accounts' notes.
    """

    def __init__(self, session: AsyncSession, search_service: Optional[ISearchService] = None):
        self.session = session
        self.note_repo = NoteRepository(session)
        # Used to resolve share grantees
        self.account_repo = AccountRepository(session)
        self.search_service = search_service

    async def create_note(self, principal_id: UUID, request: NoteCreate) -> NoteResponse:
        """Create new note."""
        note = await self.note_repo.create_note(
            principal_id, request.title, request.content, before_commit=self._stage_index
        )
        logger.info(f"Created note {note.id}")

        response = NoteResponse.from_note(note)
        await self._sync_index(note.id)
        return response

    async def get_note(self, note_id: UUID, principal_id: UUID) -> NoteResponse:
        """Get note the principal owns or has been shared."""
        note = await self.note_repo.get_readable(note_id, principal_id)
        if note is None:
            raise NotFoundError()
        return NoteResponse.from_note(note)

    async def update_note(
        self, note_id: UUID, principal_id: UUID, request: NoteUpdate
    ) -> NoteResponse:
        """Update title and/or content. Owner only."""
        note = await self.note_repo.update_owned(
            note_id, principal_id, request.changes(), before_commit=self._stage_index
        )
        if note is None:
            raise NotFoundError()
        logger.info(f"Updated note {note_id}")

        response = NoteResponse.from_note(note)
        await self._sync_index(note_id)
        return response

    async def delete_note(self, note_id: UUID, principal_id: UUID) -> None:
        """Delete note. Owner only."""
        if not await self.note_repo.delete_owned(
            note_id, principal_id, before_commit=self._stage_removal
        ):
            raise NotFoundError()

        await self._sync_index(note_id)

    async def list_notes(self, principal_id: UUID) -> List[NoteResponse]:
        """Notes owned by or shared with the principal, most recently updated first."""
        notes = await self.note_repo.list_readable(principal_id)
        notes.sort(key=lambda n: n.updated_at, reverse=True)
        return [NoteResponse.from_note(note) for note in notes]

    async def share_note(
        self, note_id: UUID, principal_id: UUID, request: ShareRequest
    ) -> NoteResponse:
        """Grant read access to another account. Owner only, idempotent."""
        if request.user_id is not None:
            grantee = await self.account_repo.get_by_id(request.user_id)
            field = "user_id"
        else:
            grantee = await self.account_repo.get_by_email(request.email)
            field = "email"

        if grantee is None:
            # Only an owner may learn that the grantee is unknown
            if await self.note_repo.get_owned(note_id, principal_id) is None:
                raise NotFoundError()
            raise ValidationError.for_field(field, "No account matches this user")

        note = await self.note_repo.share_owned(note_id, principal_id, grantee.id)
        if note is None:
            raise NotFoundError()

        logger.info(f"Note {note_id} shared with account {grantee.id}")
        return NoteResponse.from_note(note)

    async def _stage_index(self, note: Note) -> None:
        if self.search_service is not None:
            await self.search_service.stage_note(note)

    async def _stage_removal(self, note_id: UUID) -> None:
        if self.search_service is not None:
            await self.search_service.stage_removal(note_id)

    async def _sync_index(self, note_id: UUID) -> None:
        if self.search_service is not None:
            await self.search_service.sync_note(note_id)

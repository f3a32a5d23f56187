"""Note repository for database operations.

Mutations are owner-conditioned: the ownership test is part of the same
UPDATE/DELETE/INSERT statement that makes the change, so nothing can slip in
between the check and the effect.
"""

import logging
import uuid
from typing import Awaitable, Callable, Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import DateTime, and_, delete, exists, insert, literal, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..access_control import readable_by, writable_by
from ..models.base import utcnow
from ..models.note import Note, NoteShare
from ..models.types import GUID

logger = logging.getLogger(__name__)

# Fields a note update may touch. owner_id and shares are never among them.
UPDATABLE_FIELDS = frozenset({"title", "content"})

# Awaited inside the write's transaction, just before it commits
NoteHook = Callable[[Note], Awaitable[None]]
RemovalHook = Callable[[UUID], Awaitable[None]]


class NoteRepository:
    """Repository for note database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_note(
        self,
        owner_id: UUID,
        title: str,
        content: str,
        before_commit: Optional[NoteHook] = None,
    ) -> Note:
        """Create new note. The shared-with set starts empty."""
        note = Note(owner_id=owner_id, title=title, content=content, shares=[])
        self.session.add(note)
        await self.session.flush()
        await self._commit(note, before_commit)
        return note

    async def _commit(self, target, before_commit) -> None:
        # a failing hook leaves nothing behind, the note write included
        if before_commit is not None:
            try:
                await before_commit(target)
            except Exception:
                await self.session.rollback()
                raise
        await self.session.commit()

    async def _load(self, *criteria) -> Optional[Note]:
        stmt = (
            select(Note)
            .where(*criteria)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, note_id: UUID) -> Optional[Note]:
        """Get note by ID, regardless of who asks."""
        return await self._load(Note.id == note_id)

    async def get_readable(self, note_id: UUID, principal_id: UUID) -> Optional[Note]:
        """Get note if the principal owns it or it is shared with them."""
        return await self._load(Note.id == note_id, readable_by(principal_id))

    async def get_owned(self, note_id: UUID, owner_id: UUID) -> Optional[Note]:
        """Get note if owned by the principal."""
        return await self._load(Note.id == note_id, writable_by(owner_id))

    async def list_readable(
        self, principal_id: UUID, note_ids: Optional[Iterable[UUID]] = None
    ) -> List[Note]:
        """Notes the principal owns or has been shared, optionally limited to ``note_ids``."""
        stmt = select(Note).where(readable_by(principal_id))
        if note_ids is not None:
            ids = list(note_ids)
            if not ids:
                return []
            stmt = stmt.where(Note.id.in_(ids))
        stmt = stmt.execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return list(result.scalars())

    async def list_all(self) -> List[Note]:
        """Every note, for index rebuilds."""
        result = await self.session.execute(select(Note))
        return list(result.scalars())

    async def update_owned(
        self,
        note_id: UUID,
        owner_id: UUID,
        update_data: Dict[str, str],
        before_commit: Optional[NoteHook] = None,
    ) -> Optional[Note]:
        """Apply a partial title/content update if the principal owns the note."""
        values = {k: v for k, v in update_data.items() if k in UPDATABLE_FIELDS}
        values["updated_at"] = utcnow()

        stmt = (
            update(Note)
            .where(and_(Note.id == note_id, writable_by(owner_id)))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            await self.session.rollback()
            return None

        note = await self.get_by_id(note_id)
        await self._commit(note, before_commit)
        return note

    async def delete_owned(
        self, note_id: UUID, owner_id: UUID, before_commit: Optional[RemovalHook] = None
    ) -> bool:
        """Delete note and its share grants if the principal owns it."""
        owned = select(Note.id).where(and_(Note.id == note_id, writable_by(owner_id)))
        await self.session.execute(
            delete(NoteShare)
            .where(NoteShare.note_id.in_(owned))
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(
            delete(Note)
            .where(and_(Note.id == note_id, writable_by(owner_id)))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.session.rollback()
            return False

        await self._commit(note_id, before_commit)
        logger.info(f"Deleted note {note_id}")
        return True

    async def share_owned(
        self, note_id: UUID, owner_id: UUID, grantee_id: UUID
    ) -> Optional[Note]:
        """Add ``grantee_id`` to the note's shared-with set if the principal owns it.

        Adding a grantee twice, or adding the owner, changes nothing.
        """
        if grantee_id != owner_id:
            already_shared = exists(
                select(NoteShare.id).where(
                    and_(NoteShare.note_id == Note.id, NoteShare.account_id == grantee_id)
                )
            )
            now = utcnow()
            source = select(
                literal(uuid.uuid4(), GUID()),
                Note.id,
                literal(grantee_id, GUID()),
                literal(now, DateTime(timezone=True)),
                literal(now, DateTime(timezone=True)),
            ).where(and_(Note.id == note_id, writable_by(owner_id), ~already_shared))
            stmt = insert(NoteShare.__table__).from_select(
                ["id", "note_id", "account_id", "created_at", "updated_at"], source
            )
            try:
                await self.session.execute(stmt)
            except IntegrityError:
                # lost a race with an identical share; the grant exists either way
                await self.session.rollback()

        note = await self.get_owned(note_id, owner_id)
        await self.session.commit()
        return note

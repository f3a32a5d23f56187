"""Who may read or change a note.

Read: the owner, or any account in the note's shared-with set.
Write (update, delete, share): the owner only.

Denial is never reported as such. Services turn it into ``NotFoundError`` so a
caller cannot tell a forbidden note from a missing one.
"""

from uuid import UUID

from sqlalchemy import and_, exists, or_, select
from sqlalchemy.sql.elements import ColumnElement

from .models.note import Note, NoteShare


def can_read(note: Note, principal_id: UUID) -> bool:
    return note.owner_id == principal_id or principal_id in note.shared_with


def can_write(note: Note, principal_id: UUID) -> bool:
    return note.owner_id == principal_id


def readable_by(principal_id: UUID) -> ColumnElement[bool]:
    """SQL predicate on ``notes`` matching what ``can_read`` allows."""
    shared = exists(
        select(NoteShare.id).where(
            and_(NoteShare.note_id == Note.id, NoteShare.account_id == principal_id)
        )
    )
    return or_(Note.owner_id == principal_id, shared)


def writable_by(principal_id: UUID) -> ColumnElement[bool]:
    """SQL predicate on ``notes`` matching what ``can_write`` allows."""
    return Note.owner_id == principal_id

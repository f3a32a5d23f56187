"""Repository layer for data access."""

from .account_repository import AccountRepository
from .note_repository import NoteRepository

__all__ = [
    "AccountRepository",
    "NoteRepository",
]

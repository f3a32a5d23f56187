"""
Database models for NoteVault.

Models included:
    - Account: email/password credentials
    - Note: note content and its owner
    - NoteShare: read grants that make up a note's shared-with set
    - SearchTerm: inverted index rows for the database search backend
"""

from .account import Account
from .base import BaseModel
from .note import Note, NoteShare
from .search_term import SearchTerm

__all__ = [
    "BaseModel",
    "Account",
    "Note",
    "NoteShare",
    "SearchTerm",
]

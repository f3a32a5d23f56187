"""Inverted index rows backing the database search backend."""

import uuid

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel
from .types import GUID


class SearchTerm(BaseModel):
    """One distinct token of a note's title or content."""

    __tablename__ = "search_terms"

    note_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False
    )
    term: Mapped[str] = mapped_column(String(100), nullable=False)
    field: Mapped[str] = mapped_column(String(20), nullable=False)  # "title" or "content"

    __table_args__ = (
        UniqueConstraint("note_id", "term", "field", name="uq_search_terms_note_term_field"),
        Index("idx_search_terms_term", "term"),
    )

    def __repr__(self) -> str:
        return f"<SearchTerm(term='{self.term}', note_id={self.note_id})>"

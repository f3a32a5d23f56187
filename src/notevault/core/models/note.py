# Note model and its read-only share grants
import uuid
from typing import TYPE_CHECKING, List, Set

from sqlalchemy import ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import GUID

if TYPE_CHECKING:
    from .account import Account


class Note(BaseModel):
    """Note owned by one account, readable by the accounts it is shared with."""

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # owner reference, never changes after creation
    owner_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False
    )

    # ownership is checked through owner_id, the account is never loaded
    owner: Mapped["Account"] = relationship("Account", back_populates="notes", lazy="raise")

    shares: Mapped[List["NoteShare"]] = relationship(
        "NoteShare",
        back_populates="note",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        doc="Read grants to accounts other than the owner",
    )

    __table_args__ = (
        Index("idx_notes_owner_id", "owner_id"),
        Index("idx_notes_owner_updated", "owner_id", "updated_at"),
    )

    def __repr__(self) -> str:
        truncated = self.title if len(self.title) <= 30 else (self.title[:30] + "...")
        return f"<Note(title='{truncated}', owner_id={self.owner_id})>"

    @property
    def shared_with(self) -> Set[uuid.UUID]:
        """Accounts granted read access. Never contains the owner."""
        return {share.account_id for share in self.shares}


class NoteShare(BaseModel):
    """One member of a note's shared-with set."""

    __tablename__ = "note_shares"

    note_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False
    )
    account_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False
    )

    note: Mapped["Note"] = relationship("Note", back_populates="shares", lazy="raise")

    __table_args__ = (
        UniqueConstraint("note_id", "account_id", name="uq_note_shares_note_account"),
        Index("idx_note_shares_account_id", "account_id"),
    )

    def __repr__(self) -> str:
        return f"<NoteShare(note_id={self.note_id}, account_id={self.account_id})>"

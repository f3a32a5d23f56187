"""
Account model for authentication.
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel

if TYPE_CHECKING:
    from .note import Note


class Account(BaseModel):
    """Account with email/password auth. Emails are stored lower-cased."""

    __tablename__ = "accounts"

    email: Mapped[str] = mapped_column(String(320), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relations
    notes: Mapped[List["Note"]] = relationship(
        "Note",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    __table_args__ = (
        CheckConstraint("length(email) <= 320", name="ck_accounts_email_len"),
        CheckConstraint("email = lower(email)", name="ck_accounts_email_lower"),
    )

    def __repr__(self) -> str:
        return f"<Account(email='{self.email}')>"

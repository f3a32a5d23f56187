"""Search index interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from .tokenizer import tokenize


@dataclass(frozen=True)
class SearchDocument:
    """What the index knows about a note."""

    note_id: UUID
    title: str
    content: str
    terms: Dict[str, List[str]] = field(default_factory=dict)  # field name -> tokens

    @property
    def all_terms(self) -> List[str]:
        merged: Dict[str, None] = {}
        for tokens in self.terms.values():
            merged.update(dict.fromkeys(tokens))
        return list(merged)


class SearchIndexError(Exception):
    """The index backend failed or could not be reached."""


# Reads the committed state of one note; None once the note is gone
DocumentLoader = Callable[[], Awaitable[Optional[SearchDocument]]]


class SearchIndex(ABC):
    """Token-level index over note title and content.

    The index knows nothing about ownership. Callers intersect ``match``
    results with the principal's readable notes.

    A ``transactional`` index lives in the note store and is written through
    the store's own session, inside the transaction that changes the note.
    Any other index is brought up to date after the commit with ``refresh``.
    """

    backend: str = "abstract"
    transactional: bool = False

    def __init__(self, min_token_length: int = 2):
        self.min_token_length = min_token_length

    async def stage(self, session: AsyncSession, document: SearchDocument) -> None:
        """Write ``document`` inside the caller's open transaction."""
        raise NotImplementedError(f"{self.backend} index is not transactional")

    async def unstage(self, session: AsyncSession, note_id: UUID) -> None:
        """Drop ``note_id`` inside the caller's open transaction."""
        raise NotImplementedError(f"{self.backend} index is not transactional")

    async def refresh(self, note_id: UUID, load: DocumentLoader) -> None:
        """Make the entry for ``note_id`` match what ``load`` reads from the store."""
        document = await load()
        if document is None:
            await self.remove(note_id)
        else:
            await self.index(document)

    @abstractmethod
    async def ensure(self) -> None:
        """Make sure the index exists. Raises ``SearchIndexError`` if it cannot."""

    @abstractmethod
    async def index(self, document: SearchDocument) -> None:
        """Insert or replace the document for ``document.note_id``."""

    @abstractmethod
    async def remove(self, note_id: UUID) -> None:
        """Drop the document for ``note_id``. Unknown ids are ignored."""

    @abstractmethod
    async def match(self, tokens: Iterable[str]) -> Dict[UUID, int]:
        """Note ids containing any of ``tokens``, with the number of tokens matched."""

    @abstractmethod
    async def clear(self) -> None:
        """Drop every document."""

    @abstractmethod
    async def ping(self) -> bool:
        """Cheap liveness check."""

    async def close(self) -> None:
        """Release backend resources."""


def build_document(note_id: UUID, title: str, content: str, min_token_length: int = 2) -> SearchDocument:
    """Tokenize a note's searchable fields into a ``SearchDocument``."""
    return SearchDocument(
        note_id=note_id,
        title=title,
        content=content,
        terms={
            "title": tokenize(title, min_token_length),
            "content": tokenize(content, min_token_length),
        },
    )

"""
Service interfaces for NoteVault.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from uuid import UUID

from ..models.note import Note
from ..schemas.auth import AccountResponse, LoginRequest, RegisterRequest, TokenResponse
from ..schemas.common import HealthCheckResponse
from ..schemas.notes import NoteCreate, NoteResponse, NoteUpdate
from ..schemas.sharing import ShareRequest


class ISessionService(ABC):
    """Issues and verifies signed session tokens."""

    @abstractmethod
    def issue(self, account_id: UUID) -> str:
        """Mint a token for the account."""
        pass

    @abstractmethod
    def verify(self, token: str) -> UUID:
        """Return the account id a valid token was issued to."""
        pass


class IAuthService(ABC):
    """Credential store operations."""

    @abstractmethod
    async def register(self, request: RegisterRequest) -> AccountResponse:
        """Register new account."""
        pass

    @abstractmethod
    async def authenticate(self, email: str, password: str) -> UUID:
        """Check credentials and return the account id."""
        pass

    @abstractmethod
    async def login(self, request: LoginRequest) -> TokenResponse:
        """Authenticate and issue an access token."""
        pass

    @abstractmethod
    async def get_account(self, account_id: UUID) -> AccountResponse:
        """Get account by ID."""
        pass


class INoteService(ABC):
    """Note CRUD and sharing, scoped to a principal."""

    @abstractmethod
    async def create_note(self, principal_id: UUID, request: NoteCreate) -> NoteResponse:
        """Create new note owned by the principal."""
        pass

    @abstractmethod
    async def get_note(self, note_id: UUID, principal_id: UUID) -> NoteResponse:
        """Get note by ID."""
        pass

    @abstractmethod
    async def update_note(
        self, note_id: UUID, principal_id: UUID, request: NoteUpdate
    ) -> NoteResponse:
        """Update existing note."""
        pass

    @abstractmethod
    async def delete_note(self, note_id: UUID, principal_id: UUID) -> None:
        """Delete note."""
        pass

    @abstractmethod
    async def list_notes(self, principal_id: UUID) -> List[NoteResponse]:
        """List notes the principal owns or has been shared."""
        pass

    @abstractmethod
    async def share_note(
        self, note_id: UUID, principal_id: UUID, request: ShareRequest
    ) -> NoteResponse:
        """Grant another account read access."""
        pass


class ISearchService(ABC):
    """Full-text search over accessible notes."""

    @abstractmethod
    async def search_notes(self, principal_id: UUID, query: Optional[str]) -> List[NoteResponse]:
        """Search notes the principal can read."""
        pass

    @abstractmethod
    async def stage_note(self, note: Note) -> None:
        """Index note inside the transaction saving it, where the index allows."""
        pass

    @abstractmethod
    async def stage_removal(self, note_id: UUID) -> None:
        """Unindex note inside the transaction deleting it, where the index allows."""
        pass

    @abstractmethod
    async def sync_note(self, note_id: UUID) -> None:
        """After commit, make the index match the stored note."""
        pass

    @abstractmethod
    async def rebuild_index(self) -> int:
        """Reindex every note, returning how many were indexed."""
        pass


class IHealthService(ABC):
    """Health check service."""

    @abstractmethod
    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""
        pass

    @abstractmethod
    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection."""
        pass

    @abstractmethod
    async def check_search_index_health(self) -> Dict[str, Any]:
        """Check the search index backend."""
        pass

"""API routers for NoteVault."""

from .auth import router as auth_router
from .health import router as health_router
from .notes import router as notes_router
from .search import router as search_router

__all__ = ["auth_router", "notes_router", "search_router", "health_router"]

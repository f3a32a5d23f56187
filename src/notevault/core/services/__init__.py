"""
Service layer interfaces and implementations.
"""

from .interfaces import (
    IAuthService,
    IHealthService,
    INoteService,
    ISearchService,
    ISessionService,
)

from .auth_service import AuthService
from .health_service import HealthService
from .note_service import NoteService
from .search_service import SearchService
from .session_service import SessionService

__all__ = [
    # Interfaces
    "IAuthService",
    "INoteService",
    "ISearchService",
    "ISessionService",
    "IHealthService",

    # Implementations
    "AuthService",
    "NoteService",
    "SearchService",
    "SessionService",
    "HealthService",
]

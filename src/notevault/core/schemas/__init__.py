"""
Pydantic schemas for validating and documenting API requests and responses.
"""

from .auth import AccountResponse, LoginRequest, RegisterRequest, TokenResponse
from .common import ErrorResponse, HealthCheckResponse, MessageResponse
from .notes import NoteCreate, NoteResponse, NoteUpdate
from .sharing import ShareRequest

__all__ = [
    # Auth schemas
    "AccountResponse",
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    # Note schemas
    "NoteCreate",
    "NoteResponse",
    "NoteUpdate",
    # Sharing schemas
    "ShareRequest",
    # Common schemas
    "ErrorResponse",
    "HealthCheckResponse",
    "MessageResponse",
]

"""Search API endpoints."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from ..core.schemas.notes import NoteResponse
from ..core.services import SearchService
from ..middleware.auth import get_current_principal
from .deps import get_search_service

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=List[NoteResponse])
async def search_notes(
    q: Optional[str] = Query(None, description="Search query"),
    principal_id: UUID = Depends(get_current_principal),
    search_service: SearchService = Depends(get_search_service),
):
    """Search notes the caller can read by title and content."""
    return await search_service.search_notes(principal_id, q)

"""Notes API endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from ..core.schemas.common import MessageResponse
from ..core.schemas.notes import NoteCreate, NoteResponse, NoteUpdate
from ..core.schemas.sharing import ShareRequest
from ..core.services import NoteService
from ..middleware.auth import get_current_principal
from .deps import get_note_service, parse_note_id

router = APIRouter(prefix="/notes", tags=["notes"])


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
    request: NoteCreate,
    principal_id: UUID = Depends(get_current_principal),
    note_service: NoteService = Depends(get_note_service),
):
    """Create a new note."""
    return await note_service.create_note(principal_id, request)


@router.get("", response_model=List[NoteResponse])
async def list_notes(
    principal_id: UUID = Depends(get_current_principal),
    note_service: NoteService = Depends(get_note_service),
):
    """List owned notes and notes shared with the caller."""
    return await note_service.list_notes(principal_id)


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    principal_id: UUID = Depends(get_current_principal),
    note_id: UUID = Depends(parse_note_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Get a specific note."""
    return await note_service.get_note(note_id, principal_id)


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    request: NoteUpdate,
    principal_id: UUID = Depends(get_current_principal),
    note_id: UUID = Depends(parse_note_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Update a note."""
    return await note_service.update_note(note_id, principal_id, request)


@router.delete("/{note_id}", response_model=MessageResponse)
async def delete_note(
    principal_id: UUID = Depends(get_current_principal),
    note_id: UUID = Depends(parse_note_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Delete a note."""
    await note_service.delete_note(note_id, principal_id)
    return MessageResponse(message="Note deleted")


@router.post("/{note_id}/share", response_model=NoteResponse)
async def share_note(
    request: ShareRequest,
    principal_id: UUID = Depends(get_current_principal),
    note_id: UUID = Depends(parse_note_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Share a note read-only with another account."""
    return await note_service.share_note(note_id, principal_id, request)

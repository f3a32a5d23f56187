"""
Note management schemas.

These schemas define the API contracts for note CRUD operations
and search results.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.note import Note


class NoteCreate(BaseModel):
    """Note creation request schema."""

    title: str = Field(max_length=200, description="Note title, may be empty")
    content: str = Field(default="", description="Note content")

    model_config = ConfigDict(
        json_schema_extra={"example": {"title": "trip", "content": "plan the trip"}}
    )


class NoteUpdate(BaseModel):
    """Note update request schema. Only title and content can change."""

    title: Optional[str] = Field(default=None, max_length=200, description="Note title")
    content: Optional[str] = Field(default=None, description="Note content")

    model_config = ConfigDict(
        json_schema_extra={"example": {"title": "trip (final)"}}
    )

    def changes(self) -> dict:
        """Fields the client actually sent, minus explicit nulls."""
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class NoteResponse(BaseModel):
    """Note response schema."""

    id: uuid.UUID = Field(description="Note unique identifier")
    owner_id: uuid.UUID = Field(description="Note owner ID")
    title: str = Field(description="Note title")
    content: str = Field(description="Note content")
    shared_with: List[uuid.UUID] = Field(
        default_factory=list, description="Accounts with read access"
    )

    # Timestamps
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "owner_id": "456e7890-e89b-12d3-a456-426614174000",
                "title": "trip",
                "content": "plan the trip",
                "shared_with": ["789e0123-e89b-12d3-a456-426614174000"],
                "created_at": "2025-09-13T10:30:00Z",
                "updated_at": "2025-09-13T11:00:00Z",
            }
        }
    )

    @classmethod
    def from_note(cls, note: Note) -> "NoteResponse":
        return cls(
            id=note.id,
            owner_id=note.owner_id,
            title=note.title,
            content=note.content,
            shared_with=sorted(note.shared_with, key=str),
            created_at=note.created_at,
            updated_at=note.updated_at,
        )

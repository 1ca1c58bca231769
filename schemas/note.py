"""Pydantic schemas for note endpoints."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .user_schemas import ActorResponse


class CreateNoteRequest(BaseModel):
    """Request body for POST /notes."""
    title: str = Field(..., min_length=1, max_length=200)
    body: Optional[str] = None


class UpdateNoteRequest(BaseModel):
    """Request body for PATCH /notes/{note_id}. Omitted fields are left unchanged."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    body: Optional[str] = None


class NoteResponse(BaseModel):
    """A note with its raw stamp columns."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    body: Optional[str] = None
    created_by_user_id: Optional[str] = None
    updated_by_user_id: Optional[str] = None
    deleted_by_user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None


class NoteDetailResponse(NoteResponse):
    """A note with its creator and last updater resolved for display."""
    created_by: Optional[ActorResponse] = None
    updated_by: Optional[ActorResponse] = None


class NoteListResponse(BaseModel):
    """Response from GET /notes."""
    notes: list[NoteResponse]
    count: int

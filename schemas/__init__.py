"""Pydantic schemas for API request/response validation."""

from .user_schemas import ActorResponse, CreateUserRequest, UserResponse
from .note import (
    CreateNoteRequest,
    UpdateNoteRequest,
    NoteResponse,
    NoteDetailResponse,
    NoteListResponse,
)

__all__ = [
    "ActorResponse",
    "CreateUserRequest",
    "UserResponse",
    "CreateNoteRequest",
    "UpdateNoteRequest",
    "NoteResponse",
    "NoteDetailResponse",
    "NoteListResponse",
]

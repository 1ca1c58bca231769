"""Note API endpoints. Every write is stamped with the acting user."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.accountable import Accountable
from core.database import get_db
from core.dependencies import get_accountable
from models.note import Note
from models.user import User
from schemas.note import (
    CreateNoteRequest,
    NoteDetailResponse,
    NoteListResponse,
    NoteResponse,
    UpdateNoteRequest,
)
from schemas.user_schemas import ActorResponse

logger = logging.getLogger(__name__)
router = APIRouter()


async def _get_note_or_404(db: AsyncSession, note_id: str) -> Note:
    note = await db.get(Note, note_id)
    # Identity map hits bypass the trashed filter
    if note is None or note.trashed:
        raise HTTPException(status_code=404, detail="Note not found")
    return note


def _actor_response(actor: Optional[User]) -> Optional[ActorResponse]:
    if actor is None:
        return None
    return ActorResponse(id=actor.id, name=actor.name)


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
    request: CreateNoteRequest,
    context: Accountable = Depends(get_accountable),
    db: AsyncSession = Depends(get_db),
):
    """Create a note attributed to the current actor (anonymous allowed)."""
    note = Note(title=request.title, body=request.body)
    db.add(note)
    await db.commit()

    logger.info("Note %s created by %s", note.id, context.current_actor_id())
    return note


@router.get("", response_model=NoteListResponse)
async def list_notes(
    mine: bool = Query(False, description="Only notes created by the current actor"),
    created_by: Optional[str] = Query(None, description="Only notes created by this user id"),
    context: Accountable = Depends(get_accountable),
    db: AsyncSession = Depends(get_db),
):
    """
    List notes, optionally filtered by creator.

    ``mine=true`` without an authenticated user returns an empty list.
    """
    stmt = select(Note)
    if mine:
        stmt = Note.mine(stmt, context=context)
    if created_by is not None:
        # Deleted users still own their history
        creator = await db.get(User, created_by, execution_options={"include_deleted": True})
        if creator is None:
            raise HTTPException(status_code=404, detail="User not found")
        stmt = Note.only_created_by(creator, stmt)

    result = await db.execute(stmt.order_by(Note.created_at))
    notes = result.scalars().all()
    return NoteListResponse(notes=notes, count=len(notes))


@router.get("/{note_id}", response_model=NoteDetailResponse)
async def get_note(
    note_id: str,
    context: Accountable = Depends(get_accountable),
    db: AsyncSession = Depends(get_db),
):
    """Get a note with its creator and last updater resolved."""
    note = await _get_note_or_404(db, note_id)

    # created_by/updated_by are async accessors on the model, so resolve them explicitly
    return NoteDetailResponse(
        **NoteResponse.model_validate(note).model_dump(),
        created_by=_actor_response(await note.created_by(db)),
        updated_by=_actor_response(await note.updated_by(db)),
    )


@router.patch("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: str,
    request: UpdateNoteRequest,
    context: Accountable = Depends(get_accountable),
    db: AsyncSession = Depends(get_db),
):
    """Update a note; the current actor becomes its last updater."""
    note = await _get_note_or_404(db, note_id)

    for field, value in request.model_dump(exclude_unset=True).items():
        setattr(note, field, value)
    await db.commit()

    logger.info("Note %s updated by %s", note.id, context.current_actor_id())
    return note


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: str,
    context: Accountable = Depends(get_accountable),
    db: AsyncSession = Depends(get_db),
):
    """Trash a note, recording who deleted it."""
    note = await _get_note_or_404(db, note_id)

    note.soft_delete()
    await db.commit()

    logger.info("Note %s deleted by %s", note.id, context.current_actor_id())
    return Response(status_code=status.HTTP_204_NO_CONTENT)

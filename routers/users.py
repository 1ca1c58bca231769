"""User API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.accountable import Accountable
from core.database import get_db
from core.dependencies import get_accountable, require_admin, require_user
from models.user import User
from schemas.user_schemas import CreateUserRequest, UserResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: CreateUserRequest,
    context: Accountable = Depends(get_accountable),
    db: AsyncSession = Depends(get_db),
):
    """Register a user. Open to anyone, but only admins may grant admin rights."""
    caller = context.authenticated_user
    if request.is_admin and (caller is None or not caller.is_admin):
        logger.warning("Rejected admin registration by %s", caller.id if caller else None)
        raise HTTPException(status_code=403, detail="Only admins can create admins")

    user = User(name=request.name, email=request.email, is_admin=request.is_admin)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Rollback is REQUIRED: IntegrityError leaves the transaction in a failed state
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    logger.info("Created user %s", user.id)
    return user


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(require_user)):
    """The authenticated user, ignoring any act-as header."""
    return user


@router.get("/me/actor", response_model=UserResponse)
async def get_current_actor(
    user: User = Depends(require_user),
    context: Accountable = Depends(get_accountable),
):
    """The user writes are attributed to: the act-as target if set, else yourself."""
    return context.current_actor()


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Soft delete a user.

    Records they created keep pointing at them and still resolve. Admins
    cannot delete themselves, so at least one admin always remains.
    """
    user = await db.get(User, user_id)
    if user is None or user.trashed:
        raise HTTPException(status_code=404, detail="User not found")
    if user.id == admin.id:
        raise HTTPException(status_code=400, detail="Admins cannot delete themselves")

    user.soft_delete()
    await db.commit()

    logger.info("User %s deleted by admin %s", user_id, admin.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

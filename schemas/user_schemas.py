"""Pydantic schemas for user endpoints."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CreateUserRequest(BaseModel):
    """Request body for POST /users."""
    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[str] = Field(None, description="Unique contact address")
    is_admin: bool = Field(False, description="Only admins may create admins")


class UserResponse(BaseModel):
    """A user as returned by the API."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    is_admin: bool = False
    created_at: Optional[datetime] = None


class ActorResponse(BaseModel):
    """Display view of a creator/updater, which may be the anonymous fallback."""
    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = Field(None, description="None for the anonymous fallback")
    name: Optional[str] = None

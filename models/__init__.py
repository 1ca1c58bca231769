"""Database models for the accountable notes service."""

from .base import Base, SoftDeleteMixin
from .user import User
from .accountable import AccountableMixin, AccountableSoftDeleteMixin
from .note import Note

__all__ = [
    "Base",
    "SoftDeleteMixin",
    "User",
    "AccountableMixin",
    "AccountableSoftDeleteMixin",
    "Note",
]

"""Test factories for creating model instances."""

from .note_factory import NoteFactory
from .user_factory import UserFactory

__all__ = ["NoteFactory", "UserFactory"]

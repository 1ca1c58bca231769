"""
User model.

Users are the actors recorded on accountable records. They are soft
deleted so that records they created or changed stay attributable.
"""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, String, inspect

from .base import Base, SoftDeleteMixin


class User(SoftDeleteMixin, Base):
    """Application user, resolved from the bearer token subject."""

    __tablename__ = "users"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=True)
    email = Column(String, nullable=True, unique=True)
    is_admin = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<User id={self.id!r} name={self.name!r}>"

    @property
    def is_persisted(self) -> bool:
        """False for transient users, such as the anonymous display fallback."""
        return inspect(self).has_identity

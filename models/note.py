"""
Note model.

Notes are the accountable resource of the API: every write is stamped with
the acting user, and deleting a note only trashes it.
"""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text

from .accountable import AccountableSoftDeleteMixin
from .base import Base


class Note(AccountableSoftDeleteMixin, Base):
    __tablename__ = "notes"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(200), nullable=False)
    body = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

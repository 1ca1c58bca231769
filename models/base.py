"""
Declarative base and soft-delete support shared by all models.

Soft-deleted rows (``deleted_at`` set) are hidden from ORM selects by a
session-wide loader criteria. Pass ``execution_options(include_deleted=True)``
to see them, which is how actor lookups keep history attributable.
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, event
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import Session, declarative_base, with_loader_criteria

Base = declarative_base(cls=AsyncAttrs)


class SoftDeleteMixin:
    """Adds ``deleted_at`` and trash/restore helpers to a model."""

    deleted_at = Column(DateTime, nullable=True, index=True)

    @property
    def trashed(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self) -> None:
        if self.deleted_at is None:
            self.deleted_at = datetime.utcnow()

    def restore(self) -> None:
        self.deleted_at = None


@event.listens_for(Session, "do_orm_execute")
def _exclude_soft_deleted(execute_state):
    """Hide trashed rows from ORM selects unless include_deleted is requested."""
    if (
        execute_state.is_select
        and not execute_state.is_column_load
        and not execute_state.is_relationship_load
        and not execute_state.execution_options.get("include_deleted", False)
    ):
        execute_state.statement = execute_state.statement.options(
            with_loader_criteria(
                SoftDeleteMixin,
                lambda cls: cls.deleted_at.is_(None),
                include_aliases=True,
            )
        )

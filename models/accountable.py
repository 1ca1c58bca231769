"""
Actor stamping for models.

Mix ``AccountableMixin`` into a mapped class to get:

- ``created_by_user_id`` / ``updated_by_user_id`` columns (nullable user ids)
- automatic stamping from the active Accountable context on flush
- ``await record.created_by()`` / ``await record.updated_by()`` accessors
- ``only_created_by(user)`` / ``mine()`` query helpers

Soft-deletable records use ``AccountableSoftDeleteMixin`` which also records
who deleted them in ``deleted_by_user_id``.

Stamping happens in mapper ``before_insert`` / ``before_update`` events, i.e.
synchronously inside ``Session.flush()`` right before the row is written.
"""
import logging
from typing import Any, Optional

from sqlalchemy import Column, String, event, false, inspect, select
from sqlalchemy.ext.asyncio import async_object_session
from sqlalchemy.orm import declared_attr, object_session
from sqlalchemy.orm.exc import DetachedInstanceError
from sqlalchemy.sql import Select

from core.accountable import Accountable, Actor, accountable, context_for_session
from .base import SoftDeleteMixin
from .user import User

logger = logging.getLogger(__name__)


def _actor_id_column() -> Column:
    # No FK constraint: the id must outlive a hard-deleted user row
    return Column(String, nullable=True, index=True)


class AccountableMixin:
    """Records which user created and last updated a row."""

    @declared_attr
    def created_by_user_id(cls):
        return _actor_id_column()

    @declared_attr
    def updated_by_user_id(cls):
        return _actor_id_column()

    # =========================================================================
    # Actor accessors
    # =========================================================================

    async def created_by(self, session=None) -> Optional[User]:
        """User that created this record, or the anonymous fallback."""
        user_id = await self.awaitable_attrs.created_by_user_id
        return await self._resolve_actor(user_id, session)

    async def updated_by(self, session=None) -> Optional[User]:
        """User that last updated this record, or the anonymous fallback."""
        user_id = await self.awaitable_attrs.updated_by_user_id
        return await self._resolve_actor(user_id, session)

    async def _resolve_actor(self, user_id: Any, session) -> Optional[User]:
        if session is None:
            session = async_object_session(self)

        if user_id is None:
            attributes = context_for_session(session).anonymous_user_attributes()
            if not attributes:
                return None
            # Transient, never added to the session
            return User(**{key: value for key, value in attributes.items() if hasattr(User, key)})

        if session is None:
            raise DetachedInstanceError(
                f"{self.__class__.__name__} is not bound to a session; cannot load user {user_id!r}"
            )

        # Trashed users must still resolve; a hard-deleted id yields None
        return await session.get(User, user_id, execution_options={"include_deleted": True})

    # =========================================================================
    # Query helpers
    # =========================================================================

    @classmethod
    def only_created_by(cls, actor: Actor, stmt: Optional[Select] = None) -> Select:
        """Restrict to records created by ``actor``."""
        stmt = select(cls) if stmt is None else stmt
        return stmt.where(cls.created_by_user_id == actor.id)

    @classmethod
    def only_updated_by(cls, actor: Actor, stmt: Optional[Select] = None) -> Select:
        """Restrict to records last updated by ``actor``."""
        stmt = select(cls) if stmt is None else stmt
        return stmt.where(cls.updated_by_user_id == actor.id)

    @classmethod
    def mine(cls, stmt: Optional[Select] = None, context: Optional[Accountable] = None) -> Select:
        """
        Restrict to records created by the current actor.

        Without a resolved actor this matches no rows at all.
        """
        context = context or accountable()
        actor_id = context.current_actor_id()
        stmt = select(cls) if stmt is None else stmt
        if actor_id is None:
            return stmt.where(false())
        return stmt.where(cls.created_by_user_id == actor_id)


class AccountableSoftDeleteMixin(AccountableMixin, SoftDeleteMixin):
    """Accountable record that is soft deleted and remembers who deleted it."""

    @declared_attr
    def deleted_by_user_id(cls):
        return _actor_id_column()

    async def deleted_by(self, session=None) -> Optional[User]:
        """User that soft deleted this record, or the anonymous fallback once trashed."""
        if not self.trashed:
            return None
        user_id = await self.awaitable_attrs.deleted_by_user_id
        return await self._resolve_actor(user_id, session)


# =============================================================================
# Flush hooks
# =============================================================================


@event.listens_for(AccountableMixin, "before_insert", propagate=True)
def stamp_before_insert(mapper, connection, target):
    context = context_for_session(object_session(target))
    if not context.is_enabled():
        return

    actor_id = context.current_actor_id()
    if target.created_by_user_id is None:
        target.created_by_user_id = actor_id
    target.updated_by_user_id = actor_id

    logger.debug(
        "Stamped new %s created_by=%s updated_by=%s",
        mapper.class_.__name__,
        target.created_by_user_id,
        actor_id,
    )


@event.listens_for(AccountableMixin, "before_update", propagate=True)
def stamp_before_update(mapper, connection, target):
    context = context_for_session(object_session(target))
    if not context.is_enabled():
        return

    actor_id = context.current_actor_id()
    target.updated_by_user_id = actor_id

    if isinstance(target, AccountableSoftDeleteMixin):
        if inspect(target).attrs.deleted_at.history.has_changes():
            target.deleted_by_user_id = actor_id if target.deleted_at is not None else None

    logger.debug("Stamped %s updated_by=%s", mapper.class_.__name__, actor_id)

"""
Actor resolution for record stamping.

An ``Accountable`` context answers one question at flush time: which user
should be recorded as responsible for this write? It holds:

- the authenticated user (supplied by the host per request)
- an optional impersonation override (``act_as``) that wins while set
- the enabled switch (disable for bulk imports where caller values must win)
- the anonymous fallback attributes used for display only

Contexts are request scoped. The current one lives in a ContextVar and can
also be bound to a SQLAlchemy session through ``session.info`` so flush
hooks running on that session see the same state.
"""
import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Optional, Protocol, runtime_checkable

from core.config import settings

logger = logging.getLogger(__name__)

SESSION_INFO_KEY = "accountable"


@runtime_checkable
class Actor(Protocol):
    """Anything that can be recorded as creator/updater of a record."""

    id: Any
    name: Optional[str]


class Accountable:
    """Per-context actor state consulted by the stamping hooks."""

    def __init__(
        self,
        authenticated_user: Optional[Actor] = None,
        enabled: Optional[bool] = None,
        anonymous_user: Optional[dict[str, Any]] = None,
    ):
        self.authenticated_user = authenticated_user
        self._impersonated: Optional[Actor] = None
        self._enabled = settings.ACCOUNTABLE_ENABLED if enabled is None else enabled
        if anonymous_user is None and settings.ACCOUNTABLE_ANONYMOUS_USER:
            anonymous_user = dict(settings.ACCOUNTABLE_ANONYMOUS_USER)
        self._anonymous_user = anonymous_user

    # =========================================================================
    # Resolution
    # =========================================================================

    def current_actor(self) -> Optional[Actor]:
        """Impersonated user if set, else the authenticated user, else None."""
        if self._impersonated is not None:
            return self._impersonated
        return self.authenticated_user

    def current_actor_id(self) -> Any:
        actor = self.current_actor()
        return actor.id if actor is not None else None

    @property
    def impersonated_user(self) -> Optional[Actor]:
        return self._impersonated

    def act_as(self, actor: Actor) -> None:
        """Attribute subsequent writes to ``actor`` until ``reset()``."""
        logger.info("Acting as user %s", getattr(actor, "id", None))
        self._impersonated = actor

    def reset(self) -> None:
        """Drop the impersonation override."""
        if self._impersonated is not None:
            logger.info("Stopped acting as user %s", self._impersonated.id)
        self._impersonated = None

    @contextmanager
    def acting_as(self, actor: Actor) -> Iterator["Accountable"]:
        previous = self._impersonated
        self.act_as(actor)
        try:
            yield self
        finally:
            self._impersonated = previous

    # =========================================================================
    # Enabled switch
    # =========================================================================

    def is_enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        logger.info("Actor stamping enabled")
        self._enabled = True

    def disable(self) -> None:
        logger.info("Actor stamping disabled")
        self._enabled = False

    @contextmanager
    def disabled(self) -> Iterator["Accountable"]:
        """Temporarily switch stamping off, restoring the previous flag on exit."""
        previous = self._enabled
        self.disable()
        try:
            yield self
        finally:
            self._enabled = previous

    # =========================================================================
    # Anonymous fallback
    # =========================================================================

    def anonymous_user_attributes(self) -> Optional[dict[str, Any]]:
        return self._anonymous_user

    def set_anonymous_user(self, attributes: Optional[dict[str, Any]]) -> None:
        self._anonymous_user = dict(attributes) if attributes else None


_current: ContextVar[Optional[Accountable]] = ContextVar("accountable_context", default=None)


def accountable() -> Accountable:
    """Return the context for the current execution scope, creating one if needed."""
    context = _current.get()
    if context is None:
        context = Accountable()
        _current.set(context)
    return context


@contextmanager
def accountable_scope(authenticated_user: Optional[Actor] = None, session=None, **kwargs) -> Iterator[Accountable]:
    """
    Run a block with a fresh Accountable context.

    When ``session`` is given (sync or async SQLAlchemy session) the context is
    also bound to it, so flushes on that session use this context even from
    code that runs outside the current ContextVar scope.
    """
    context = Accountable(authenticated_user=authenticated_user, **kwargs)
    token = _current.set(context)
    try:
        if session is None:
            yield context
        else:
            with bound_to_session(session, context):
                yield context
    finally:
        _current.reset(token)


@contextmanager
def bound_to_session(session, context: Accountable) -> Iterator[Accountable]:
    """Bind ``context`` to ``session`` for the block, restoring any previous binding."""
    previous = session.info.get(SESSION_INFO_KEY)
    session.info[SESSION_INFO_KEY] = context
    try:
        yield context
    finally:
        if previous is None:
            session.info.pop(SESSION_INFO_KEY, None)
        else:
            session.info[SESSION_INFO_KEY] = previous


def context_for_session(session) -> Accountable:
    """Context bound to ``session`` if any, otherwise the ambient one."""
    if session is not None:
        context = session.info.get(SESSION_INFO_KEY)
        if context is not None:
            return context
    return accountable()

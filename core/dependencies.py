"""Request-scoped dependencies wiring auth and the database to actor stamping."""
import logging
from typing import AsyncGenerator, Optional

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from core.accountable import Accountable, bound_to_session
from core.auth import AuthContext, get_optional_user
from core.config import settings
from core.database import get_db
from models.user import User

logger = logging.getLogger(__name__)


async def get_accountable(
    request: Request,
    auth: Optional[AuthContext] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
) -> AsyncGenerator[Accountable, None]:
    """
    Fresh Accountable context for this request, bound to the request session.

    Admins may send the act-as header to attribute writes to another user.
    """
    user = None
    if auth is not None:
        user = await db.get(User, auth.user_id)
        if user is None or user.trashed:
            raise HTTPException(status_code=401, detail="Unknown or deleted user")

    context = Accountable(authenticated_user=user)

    target_id = request.headers.get(settings.ACT_AS_HEADER)
    if target_id:
        if user is None or not user.is_admin:
            logger.warning("Rejected act-as %s from non-admin %s", target_id, auth.user_id if auth else None)
            raise HTTPException(status_code=403, detail="Only admins can act as another user")
        target = await db.get(User, target_id)
        if target is None or target.trashed:
            raise HTTPException(status_code=404, detail="User to act as not found")
        context.act_as(target)

    with bound_to_session(db, context):
        yield context


async def require_user(context: Accountable = Depends(get_accountable)) -> User:
    """Dependency that requires an authenticated user."""
    if context.authenticated_user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return context.authenticated_user


async def require_admin(user: User = Depends(require_user)) -> User:
    """Dependency that requires admin privileges."""
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="This action requires admin privileges")
    return user

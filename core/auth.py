import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from core.config import settings

logger = logging.getLogger(__name__)
security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


@dataclass
class AuthContext:
    """Structured auth context from JWT claims."""

    user_id: str


def create_access_token(user_id: str, expires_minutes: Optional[int] = None) -> str:
    """Issue a signed bearer token for ``user_id``."""
    now = datetime.now(timezone.utc)
    expires = now + timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": user_id,
        "iat": int(now.timestamp()),
        "exp": int(expires.timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> AuthContext:
    """Verify ``token`` and build an AuthContext, raising 401 on failure."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except JWTError as e:
        logger.info("JWT validation error: %s", e)
        raise HTTPException(status_code=401, detail="Could not validate credentials")

    subject = payload.get("sub")
    if not subject:
        raise HTTPException(status_code=401, detail="Invalid claims")

    return AuthContext(user_id=subject)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> AuthContext:
    """Validate JWT and return AuthContext."""
    return decode_token(credentials.credentials)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
) -> Optional[AuthContext]:
    """Like get_current_user, but anonymous requests yield None."""
    if credentials is None:
        return None
    return decode_token(credentials.credentials)

"""
FastAPI dependency injection functions.

Provides the current user and the app's real-time components.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dispatcher import NotificationDispatcher
from app.core.security import decode_token
from app.models.user import User
from app.services.user_service import UserService

# ---------------------------------------------------------------------------
# HTTP Bearer scheme (auto_error=False so we can return custom 401)
# ---------------------------------------------------------------------------

bearer_scheme = HTTPBearer(auto_error=False)


# ---------------------------------------------------------------------------
# Current user
# ---------------------------------------------------------------------------

async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Validate Bearer JWT and return the matching User.

    The identity provider owns accounts, so a first request from a valid
    subject creates the local row from the token claims.

    Raises 401 if:
    - No token provided
    - Token is invalid or expired
    - Token has no subject
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "MISSING_TOKEN", "message": "Authorization header required"},
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = decode_token(credentials.credentials)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "INVALID_TOKEN", "message": "Token is invalid or expired"},
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = claims.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "INVALID_TOKEN", "message": "Token has no subject"},
            headers={"WWW-Authenticate": "Bearer"},
        )

    return await UserService(db=db).ensure_user(user_id, claims)


# ---------------------------------------------------------------------------
# Real-time components (built per app in the lifespan)
# ---------------------------------------------------------------------------

def get_dispatcher(request: Request) -> NotificationDispatcher:
    return request.app.state.dispatcher

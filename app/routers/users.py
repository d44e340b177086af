"""
User endpoints.

GET    /users/me              - current user (created from token claims on first call)
PUT    /users/me              - update own name / image
DELETE /users/me              - delete own account data
GET    /users/search?q=       - search users by name or email
GET    /users/{id}/activity   - recent posts, comments and likes
GET    /users/{id}            - public profile with activity counts
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import get_current_user
from app.models.user import User
from app.schemas.user import (
    UserActivityResponse,
    UserResponse,
    UserSearchResponse,
    UserUpdateRequest,
)
from app.services.user_service import UserService

router = APIRouter()


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db=db)


# ---------------------------------------------------------------------------
# Current user (declared before /{user_id} so "me" is not taken as an id)
# ---------------------------------------------------------------------------

@router.get("/me", response_model=UserResponse, summary="Current user")
async def get_me(
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    return await service.get_user(current_user.id)


@router.put("/me", response_model=UserResponse, summary="Update current user")
async def update_me(
    body: UserUpdateRequest,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    return await service.update_me(current_user, body)


@router.delete(
    "/me",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete current user",
)
async def delete_me(
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> None:
    await service.delete_me(current_user)


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

@router.get("/search", response_model=UserSearchResponse, summary="Search users")
async def search_users(
    q: str = Query(..., min_length=1),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    service: UserService = Depends(get_user_service),
) -> UserSearchResponse:
    return await service.search_users(q, skip=skip, limit=limit)


@router.get(
    "/{user_id}/activity",
    response_model=UserActivityResponse,
    summary="Recent activity of a user",
)
async def get_user_activity(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> UserActivityResponse:
    return await service.get_activity(user_id)


@router.get("/{user_id}", response_model=UserResponse, summary="Get a user")
async def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    return await service.get_user(user_id)

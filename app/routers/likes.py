"""
Like endpoints.

POST /likes/toggle             - like or unlike a post (liking notifies the author)
GET  /likes/status/{post_id}   - whether the current user likes a post
GET  /likes/post/{post_id}     - who liked a post
GET  /likes/user/{user_id}     - posts a user liked
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import get_current_user, get_dispatcher
from app.core.dispatcher import NotificationDispatcher
from app.models.user import User
from app.schemas.like import (
    LikeListResponse,
    LikeStatusResponse,
    LikeToggleRequest,
    LikeToggleResponse,
)
from app.services.like_service import LikeService

router = APIRouter()


def get_like_service(
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> LikeService:
    return LikeService(db=db, dispatcher=dispatcher)


@router.post("/toggle", response_model=LikeToggleResponse, summary="Like or unlike a post")
async def toggle_like(
    body: LikeToggleRequest,
    current_user: User = Depends(get_current_user),
    service: LikeService = Depends(get_like_service),
) -> LikeToggleResponse:
    return await service.toggle_like(body.post_id, user=current_user)


@router.get(
    "/status/{post_id}",
    response_model=LikeStatusResponse,
    summary="Like status of a post for the current user",
)
async def like_status(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    service: LikeService = Depends(get_like_service),
) -> LikeStatusResponse:
    return await service.like_status(post_id, user=current_user)


@router.get("/post/{post_id}", response_model=LikeListResponse, summary="List likes on a post")
async def list_post_likes(
    post_id: UUID,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    service: LikeService = Depends(get_like_service),
) -> LikeListResponse:
    return await service.list_post_likes(post_id, skip=skip, limit=limit)


@router.get("/user/{user_id}", response_model=LikeListResponse, summary="List likes by a user")
async def list_user_likes(
    user_id: str,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    service: LikeService = Depends(get_like_service),
) -> LikeListResponse:
    return await service.list_user_likes(user_id, skip=skip, limit=limit)

"""
Comment endpoints.

POST   /comments                 - comment on a post (notifies the author)
GET    /comments/post/{post_id}  - list comments on a post
GET    /comments/user/{user_id}  - list comments by a user
PUT    /comments/{id}            - edit own comment
DELETE /comments/{id}            - delete own comment
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import get_current_user, get_dispatcher
from app.core.dispatcher import NotificationDispatcher
from app.models.user import User
from app.schemas.comment import (
    CommentCreateRequest,
    CommentListResponse,
    CommentResponse,
    CommentUpdateRequest,
)
from app.services.comment_service import CommentService

router = APIRouter()


def get_comment_service(
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> CommentService:
    return CommentService(db=db, dispatcher=dispatcher)


@router.post(
    "",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a post",
)
async def create_comment(
    body: CommentCreateRequest,
    current_user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
) -> CommentResponse:
    return await service.create_comment(body, author=current_user)


@router.get(
    "/post/{post_id}",
    response_model=CommentListResponse,
    summary="List comments on a post",
)
async def list_comments(
    post_id: UUID,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    service: CommentService = Depends(get_comment_service),
) -> CommentListResponse:
    return await service.list_comments(post_id, skip=skip, limit=limit)


@router.delete(
    "/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete own comment",
)
async def delete_comment(
    comment_id: UUID,
    current_user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
) -> None:
    await service.delete_comment(comment_id, actor=current_user)


@router.get(
    "/user/{user_id}",
    response_model=CommentListResponse,
    summary="List comments by a user",
)
async def list_user_comments(
    user_id: str,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    service: CommentService = Depends(get_comment_service),
) -> CommentListResponse:
    return await service.list_user_comments(user_id, skip=skip, limit=limit)


@router.put("/{comment_id}", response_model=CommentResponse, summary="Edit own comment")
async def update_comment(
    comment_id: UUID,
    body: CommentUpdateRequest,
    current_user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
) -> CommentResponse:
    return await service.update_comment(comment_id, body, actor=current_user)

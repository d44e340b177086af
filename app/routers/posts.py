"""
Post endpoints.

GET    /posts           - list posts, newest first
POST   /posts           - create a post
GET    /posts/user/{id} - list one user's posts
GET    /posts/{id}      - post detail with counts
PUT    /posts/{id}      - edit own post
DELETE /posts/{id}      - delete own post
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import get_current_user
from app.models.user import User
from app.schemas.post import (
    PostCreateRequest,
    PostDetailResponse,
    PostListResponse,
    PostResponse,
    PostUpdateRequest,
)
from app.services.post_service import PostService

router = APIRouter()


def get_post_service(db: AsyncSession = Depends(get_db)) -> PostService:
    return PostService(db=db)


@router.get("", response_model=PostListResponse, summary="List posts")
async def list_posts(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    author_id: str | None = Query(default=None),
    service: PostService = Depends(get_post_service),
) -> PostListResponse:
    return await service.list_posts(skip=skip, limit=limit, author_id=author_id)


@router.post(
    "",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a post",
)
async def create_post(
    body: PostCreateRequest,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    return await service.create_post(body, author=current_user)


@router.get("/user/{user_id}", response_model=PostListResponse, summary="List a user's posts")
async def list_user_posts(
    user_id: str,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    service: PostService = Depends(get_post_service),
) -> PostListResponse:
    return await service.list_posts(skip=skip, limit=limit, author_id=user_id)


@router.get("/{post_id}", response_model=PostDetailResponse, summary="Get a post")
async def get_post(
    post_id: UUID,
    service: PostService = Depends(get_post_service),
) -> PostDetailResponse:
    return await service.get_post(post_id)


@router.put("/{post_id}", response_model=PostResponse, summary="Edit own post")
async def update_post(
    post_id: UUID,
    body: PostUpdateRequest,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    return await service.update_post(post_id, body, actor=current_user)


@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete own post",
)
async def delete_post(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
) -> None:
    await service.delete_post(post_id, actor=current_user)

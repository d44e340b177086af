"""
Post business logic.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.comment import Comment
from app.models.like import Like
from app.models.post import Post
from app.models.user import User
from app.schemas.post import (
    PostCreateRequest,
    PostDetailResponse,
    PostListResponse,
    PostResponse,
    PostUpdateRequest,
)
from app.schemas.user import UserSummaryResponse


class PostService:
    """Handles post CRUD."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create_post(self, data: PostCreateRequest, author: User) -> PostResponse:
        post = Post(
            title=data.title,
            content=data.content,
            image_url=data.image_url,
            author_id=author.id,
        )
        self.db.add(post)
        await self.db.flush()
        await self.db.refresh(post)
        return PostResponse.model_validate(post)

    async def list_posts(
        self,
        skip: int = 0,
        limit: int = 20,
        author_id: str | None = None,
    ) -> PostListResponse:
        """List posts newest first, optionally for one author."""
        stmt = select(Post)
        if author_id is not None:
            stmt = stmt.where(Post.author_id == author_id)

        total = await self.db.scalar(
            select(func.count()).select_from(stmt.subquery())
        ) or 0

        result = await self.db.execute(
            stmt.order_by(Post.created_at.desc()).offset(skip).limit(limit)
        )
        posts = [PostResponse.model_validate(p) for p in result.scalars().all()]
        return PostListResponse(posts=posts, total=total, skip=skip, limit=limit)

    async def get_post(self, post_id: UUID) -> PostDetailResponse:
        post = await self.get_post_or_404(post_id)
        author = await self.db.get(User, post.author_id)

        comment_count = await self.db.scalar(
            select(func.count(Comment.id)).where(Comment.post_id == post_id)
        )
        like_count = await self.db.scalar(
            select(func.count(Like.id)).where(Like.post_id == post_id)
        )

        return PostDetailResponse(
            **PostResponse.model_validate(post).model_dump(),
            author=UserSummaryResponse.model_validate(author) if author else None,
            comment_count=comment_count or 0,
            like_count=like_count or 0,
        )

    async def update_post(
        self, post_id: UUID, data: PostUpdateRequest, actor: User
    ) -> PostResponse:
        """Update a post. Only its author can edit it."""
        post = await self.get_post_or_404(post_id)
        if post.author_id != actor.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={"code": "FORBIDDEN", "message": "You can only edit your own posts"},
            )

        if data.title is not None:
            post.title = data.title
        if data.content is not None:
            post.content = data.content
        if data.image_url is not None:
            post.image_url = data.image_url

        await self.db.flush()
        await self.db.refresh(post)
        return PostResponse.model_validate(post)

    async def delete_post(self, post_id: UUID, actor: User) -> None:
        """Delete a post. Only its author can delete it."""
        post = await self.get_post_or_404(post_id)
        if post.author_id != actor.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={"code": "FORBIDDEN", "message": "You can only delete your own posts"},
            )
        await self.db.delete(post)
        await self.db.flush()

    async def get_post_or_404(self, post_id: UUID) -> Post:
        post = await self.db.get(Post, post_id)
        if post is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"code": "POST_NOT_FOUND", "message": "Post not found"},
            )
        return post

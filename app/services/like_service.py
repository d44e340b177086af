"""
Like business logic.

Liking someone else's post stores a `like` notification for the author and
pushes it if they are online. Unliking never notifies.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.dispatcher import NotificationDispatcher
from app.models.like import Like
from app.models.notification import NotificationType
from app.models.user import User
from app.schemas.like import (
    LikeListResponse,
    LikeResponse,
    LikeStatusResponse,
    LikeToggleResponse,
)
from app.services.notification_service import NotificationService
from app.services.post_service import PostService


class LikeService:
    def __init__(self, db: AsyncSession, dispatcher: NotificationDispatcher) -> None:
        self.db = db
        self.notifications = NotificationService(db=db, dispatcher=dispatcher)

    async def toggle_like(self, post_id: UUID, user: User) -> LikeToggleResponse:
        post = await PostService(self.db).get_post_or_404(post_id)
        existing = await self._get_like(post_id, user.id)

        if existing is not None:
            await self.db.delete(existing)
            await self.db.flush()
            return LikeToggleResponse(
                action="unliked",
                liked=False,
                like_count=await self._count(post_id),
            )

        self.db.add(Like(post_id=post_id, user_id=user.id))
        await self.db.flush()
        like_count = await self._count(post_id)

        # Don't notify users liking their own post
        if post.author_id != user.id:
            notification = await self.notifications.create(
                user_id=post.author_id,
                type=NotificationType.LIKE,
                message=f"{user.name or 'Someone'} liked your post",
            )
            await self.db.commit()
            self.notifications.dispatch(notification)

        return LikeToggleResponse(action="liked", liked=True, like_count=like_count)

    async def like_status(self, post_id: UUID, user: User) -> LikeStatusResponse:
        await PostService(self.db).get_post_or_404(post_id)
        existing = await self._get_like(post_id, user.id)
        return LikeStatusResponse(
            liked=existing is not None,
            like_count=await self._count(post_id),
            like_id=existing.id if existing else None,
        )

    async def list_post_likes(
        self, post_id: UUID, skip: int = 0, limit: int = 20
    ) -> LikeListResponse:
        """Who liked a post, newest first."""
        await PostService(self.db).get_post_or_404(post_id)
        return await self._list(Like.post_id == post_id, skip, limit)

    async def list_user_likes(
        self, user_id: str, skip: int = 0, limit: int = 20
    ) -> LikeListResponse:
        return await self._list(Like.user_id == user_id, skip, limit)

    async def _list(
        self, condition: ColumnElement[bool], skip: int, limit: int
    ) -> LikeListResponse:
        total = await self.db.scalar(
            select(func.count(Like.id)).where(condition)
        ) or 0
        result = await self.db.execute(
            select(Like)
            .options(selectinload(Like.user))
            .where(condition)
            .order_by(Like.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        likes = [LikeResponse.model_validate(lk) for lk in result.scalars().all()]
        return LikeListResponse(likes=likes, total=total)

    async def _get_like(self, post_id: UUID, user_id: str) -> Like | None:
        return await self.db.scalar(
            select(Like).where(Like.post_id == post_id, Like.user_id == user_id)
        )

    async def _count(self, post_id: UUID) -> int:
        return await self.db.scalar(
            select(func.count(Like.id)).where(Like.post_id == post_id)
        ) or 0

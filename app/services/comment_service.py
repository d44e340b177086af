"""
Comment business logic.

Creating a comment on someone else's post stores a `comment` notification
for the post author and pushes it to them if they are online.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.dispatcher import NotificationDispatcher
from app.models.comment import Comment
from app.models.notification import NotificationType
from app.models.user import User
from app.schemas.comment import (
    CommentCreateRequest,
    CommentListResponse,
    CommentResponse,
    CommentUpdateRequest,
)
from app.schemas.user import UserSummaryResponse
from app.services.notification_service import NotificationService
from app.services.post_service import PostService

logger = logging.getLogger(__name__)


def _to_response(comment: Comment, author: User | None) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        post_id=comment.post_id,
        user_id=comment.user_id,
        content=comment.content,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        author=UserSummaryResponse.model_validate(author) if author else None,
    )


class CommentService:
    def __init__(self, db: AsyncSession, dispatcher: NotificationDispatcher) -> None:
        self.db = db
        self.notifications = NotificationService(db=db, dispatcher=dispatcher)

    async def create_comment(self, data: CommentCreateRequest, author: User) -> CommentResponse:
        """
        Create a comment on a post.
        Notifies the post author unless they commented on their own post.
        """
        post = await PostService(self.db).get_post_or_404(data.post_id)

        comment = Comment(post_id=post.id, user_id=author.id, content=data.content)
        self.db.add(comment)
        await self.db.flush()
        await self.db.refresh(comment)

        if post.author_id == author.id:
            return _to_response(comment, author)

        notification = await self.notifications.create(
            user_id=post.author_id,
            type=NotificationType.COMMENT,
            message=f"{author.name or 'Someone'} commented on your post",
        )
        # Push only what is durably stored.
        await self.db.commit()
        self.notifications.dispatch(notification)

        return _to_response(comment, author)

    async def list_comments(
        self,
        post_id: UUID,
        skip: int = 0,
        limit: int = 20,
    ) -> CommentListResponse:
        """List comments for a post, newest first."""
        await PostService(self.db).get_post_or_404(post_id)

        total = await self.db.scalar(
            select(func.count(Comment.id)).where(Comment.post_id == post_id)
        ) or 0

        result = await self.db.execute(
            select(Comment)
            .options(selectinload(Comment.author))
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        comments = [_to_response(c, c.author) for c in result.scalars().all()]
        return CommentListResponse(comments=comments, total=total)

    async def list_user_comments(
        self,
        user_id: str,
        skip: int = 0,
        limit: int = 20,
    ) -> CommentListResponse:
        """List comments written by a user, newest first."""
        total = await self.db.scalar(
            select(func.count(Comment.id)).where(Comment.user_id == user_id)
        ) or 0

        result = await self.db.execute(
            select(Comment)
            .options(selectinload(Comment.author))
            .where(Comment.user_id == user_id)
            .order_by(Comment.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        comments = [_to_response(c, c.author) for c in result.scalars().all()]
        return CommentListResponse(comments=comments, total=total)

    async def update_comment(
        self, comment_id: UUID, data: CommentUpdateRequest, actor: User
    ) -> CommentResponse:
        """Edit a comment. Only its author can edit it; no notification is sent."""
        comment = await self._get_own_comment(comment_id, actor, action="edit")
        comment.content = data.content
        await self.db.flush()
        await self.db.refresh(comment)
        return _to_response(comment, actor)

    async def delete_comment(self, comment_id: UUID, actor: User) -> None:
        """Delete a comment. Only its author can delete it."""
        comment = await self._get_own_comment(comment_id, actor, action="delete")
        await self.db.delete(comment)
        await self.db.flush()

    async def _get_own_comment(self, comment_id: UUID, actor: User, action: str) -> Comment:
        comment = await self.db.get(Comment, comment_id)
        if comment is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"code": "COMMENT_NOT_FOUND", "message": "Comment not found"},
            )
        if comment.user_id != actor.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "code": "FORBIDDEN",
                    "message": f"You can only {action} your own comments",
                },
            )
        return comment

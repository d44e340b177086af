"""
User business logic.

Users are owned by the identity provider; the local row mirrors the token
claims so posts, comments and notifications have something to point at.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.comment import Comment
from app.models.like import Like
from app.models.post import Post
from app.models.user import User
from app.schemas.user import (
    ActivityCommentResponse,
    ActivityLikeResponse,
    ActivityPostResponse,
    UserActivityResponse,
    UserResponse,
    UserSearchResponse,
    UserSummaryResponse,
    UserUpdateRequest,
)

logger = logging.getLogger(__name__)


def _claimed_image(claims: dict[str, Any]) -> str | None:
    return claims.get("picture") or claims.get("image_url")


class UserService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def ensure_user(self, user_id: str, claims: dict[str, Any]) -> User:
        """
        Return the user for this subject, creating it from claims if new.

        Runs first in the request, so losing an insert race to a concurrent
        first request can roll the session back and read the winner's row.
        Profile fields present in the claims overwrite stale stored values.
        """
        user = await self.db.get(User, user_id)
        if user is None:
            user = User(
                id=user_id,
                email=claims.get("email"),
                name=claims.get("name"),
                image_url=_claimed_image(claims),
            )
            self.db.add(user)
            try:
                await self.db.flush()
            except IntegrityError:
                await self.db.rollback()
                user = await self.db.scalar(select(User).where(User.id == user_id))
                if user is None:
                    raise
            else:
                await self.db.refresh(user)
                logger.info("Created local user for subject %s", user_id)
                return user

        self._apply_claims(user, claims)
        return user

    async def update_me(self, user: User, data: UserUpdateRequest) -> UserResponse:
        if data.name is not None:
            user.name = data.name
        if data.image_url is not None:
            user.image_url = data.image_url
        await self.db.flush()
        return await self.get_user(user.id)

    async def delete_me(self, user: User) -> None:
        """Delete the local user; posts, comments, likes and notifications cascade."""
        await self.db.delete(user)
        await self.db.flush()
        logger.info("Deleted local user %s", user.id)

    async def search_users(
        self,
        q: str,
        skip: int = 0,
        limit: int = 20,
    ) -> UserSearchResponse:
        """Case-insensitive substring match on name or email."""
        pattern = f"%{q.lower()}%"
        stmt = select(User).where(
            or_(
                func.lower(User.name).like(pattern),
                func.lower(User.email).like(pattern),
            )
        )

        total = await self.db.scalar(
            select(func.count()).select_from(stmt.subquery())
        ) or 0

        result = await self.db.execute(
            stmt.order_by(User.created_at.desc()).offset(skip).limit(limit)
        )
        users = [UserSummaryResponse.model_validate(u) for u in result.scalars().all()]
        return UserSearchResponse(users=users, total=total, skip=skip, limit=limit)

    async def get_activity(self, user_id: str, limit: int = 5) -> UserActivityResponse:
        """Most recent posts, comments and likes by a user."""
        await self._get_user_or_404(user_id)

        posts = await self.db.scalars(
            select(Post)
            .where(Post.author_id == user_id)
            .order_by(Post.created_at.desc())
            .limit(limit)
        )
        comments = await self.db.scalars(
            select(Comment)
            .where(Comment.user_id == user_id)
            .order_by(Comment.created_at.desc())
            .limit(limit)
        )
        likes = await self.db.scalars(
            select(Like)
            .where(Like.user_id == user_id)
            .order_by(Like.created_at.desc())
            .limit(limit)
        )

        return UserActivityResponse(
            recent_posts=[ActivityPostResponse.model_validate(p) for p in posts.all()],
            recent_comments=[ActivityCommentResponse.model_validate(c) for c in comments.all()],
            recent_likes=[ActivityLikeResponse.model_validate(lk) for lk in likes.all()],
        )

    @staticmethod
    def _apply_claims(user: User, claims: dict[str, Any]) -> None:
        updates = {
            "email": claims.get("email"),
            "name": claims.get("name"),
            "image_url": _claimed_image(claims),
        }
        for field, value in updates.items():
            if value is not None and getattr(user, field) != value:
                setattr(user, field, value)

    async def _get_user_or_404(self, user_id: str) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"code": "USER_NOT_FOUND", "message": "User not found"},
            )
        return user

    async def get_user(self, user_id: str) -> UserResponse:
        user = await self._get_user_or_404(user_id)

        post_count = await self.db.scalar(
            select(func.count(Post.id)).where(Post.author_id == user_id)
        )
        comment_count = await self.db.scalar(
            select(func.count(Comment.id)).where(Comment.user_id == user_id)
        )
        like_count = await self.db.scalar(
            select(func.count(Like.id)).where(Like.user_id == user_id)
        )

        return UserResponse(
            id=user.id,
            name=user.name,
            email=user.email,
            image_url=user.image_url,
            created_at=user.created_at,
            post_count=post_count or 0,
            comment_count=comment_count or 0,
            like_count=like_count or 0,
        )

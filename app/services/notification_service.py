"""
Business logic for notifications.
Handles creation, real-time dispatch, and read-state management.
All queries scoped by user_id.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dispatcher import DeliveryOutcome, NotificationDispatcher
from app.models.notification import Notification, NotificationType
from app.schemas.notification import (
    MarkReadResponse,
    NotificationListResponse,
    NotificationPayload,
    NotificationResponse,
)

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(
        self,
        db: AsyncSession,
        dispatcher: NotificationDispatcher | None = None,
    ) -> None:
        self._db = db
        self._dispatcher = dispatcher

    # ------------------------------------------------------------------
    # Create a notification record in the DB
    # Called from comment_service / like_service
    # ------------------------------------------------------------------

    async def create(
        self,
        user_id: str,
        type: NotificationType,
        message: str,
    ) -> Notification:
        """
        Insert a notification row.
        Does NOT push it over the WebSocket; call dispatch() once the
        surrounding transaction is committed.
        """
        notification = Notification(
            user_id=user_id,
            type=type,
            message=message,
            read=False,
        )
        self._db.add(notification)
        await self._db.flush()
        await self._db.refresh(notification)
        return notification

    def dispatch(self, notification: Notification) -> DeliveryOutcome:
        """
        Push a stored notification to its recipient if they are online.
        An offline recipient is not an error: the row stays unread in the DB.
        """
        if self._dispatcher is None:
            raise RuntimeError("NotificationService was built without a dispatcher")

        payload = NotificationPayload.model_validate(notification)
        outcome = self._dispatcher.deliver(notification.user_id, payload)
        if not outcome.is_delivered:
            logger.debug(
                "Notification %s stored for offline user_id=%s",
                notification.id,
                notification.user_id,
            )
        return outcome

    # ------------------------------------------------------------------
    # GET /notifications
    # ------------------------------------------------------------------

    async def list_notifications(
        self,
        user_id: str,
        unread_only: bool = False,
        skip: int = 0,
        limit: int = 50,
    ) -> NotificationListResponse:
        """
        List notifications for the current user, newest first.
        Optionally filter to unread only.
        """
        base_stmt = select(Notification).where(Notification.user_id == user_id)

        if unread_only:
            base_stmt = base_stmt.where(Notification.read.is_(False))

        total = await self._db.scalar(
            select(func.count()).select_from(base_stmt.subquery())
        ) or 0

        # Unread count (always, regardless of filter)
        unread_count = await self._db.scalar(
            select(func.count()).where(
                Notification.user_id == user_id,
                Notification.read.is_(False),
            )
        ) or 0

        result = await self._db.execute(
            base_stmt
            .order_by(Notification.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        notifications = result.scalars().all()

        return NotificationListResponse(
            data=[NotificationResponse.model_validate(n) for n in notifications],
            total=total,
            unread_count=unread_count,
        )

    # ------------------------------------------------------------------
    # PATCH /notifications/{id}/read
    # ------------------------------------------------------------------

    async def mark_read(
        self,
        notification_id: uuid.UUID,
        user_id: str,
    ) -> NotificationResponse:
        """
        Mark a single notification as read.
        Scoped to user_id to prevent cross-user updates.
        """
        notification = await self._db.scalar(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
        )
        if notification is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={
                    "code": "NOTIFICATION_NOT_FOUND",
                    "message": "Notification not found.",
                },
            )

        notification.read = True
        await self._db.flush()
        return NotificationResponse.model_validate(notification)

    # ------------------------------------------------------------------
    # POST /notifications/read
    # ------------------------------------------------------------------

    async def mark_all_read(self, user_id: str) -> MarkReadResponse:
        """Mark all unread notifications as read for a user."""
        result = await self._db.execute(
            update(Notification)
            .where(
                Notification.user_id == user_id,
                Notification.read.is_(False),
            )
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
        return MarkReadResponse(updated=result.rowcount)

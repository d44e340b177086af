"""
Pydantic schemas for notifications.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.models.notification import NotificationType


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------

class NotificationResponse(BaseModel):
    """Single notification response."""
    id: uuid.UUID
    user_id: str
    type: NotificationType
    message: str
    read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class NotificationListResponse(BaseModel):
    """Response for GET /notifications."""
    data: list[NotificationResponse]
    total: int
    unread_count: int


class MarkReadResponse(BaseModel):
    success: bool = True
    updated: int


# ---------------------------------------------------------------------------
# Real-time payload pushed as `new_notification` over the WebSocket
# ---------------------------------------------------------------------------

class NotificationPayload(BaseModel):
    """
    Immutable copy of a stored notification, camelCased on the wire
    (`userId`, `createdAt`) to match what the web client reads.
    """
    id: uuid.UUID
    type: NotificationType
    message: str
    user_id: str
    read: bool = False
    created_at: datetime

    model_config = ConfigDict(
        frozen=True,
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

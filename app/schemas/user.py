"""
Pydantic schemas for users.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------

class UserUpdateRequest(BaseModel):
    """Editable profile fields. Omitted or null fields are left unchanged."""
    name: str | None = Field(default=None, max_length=100)
    image_url: str | None = Field(default=None, max_length=500)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------

class UserSummaryResponse(BaseModel):
    """Compact user embedded in posts and comments."""
    id: str
    name: str | None
    email: str | None
    image_url: str | None

    model_config = {"from_attributes": True}


class UserResponse(UserSummaryResponse):
    created_at: datetime
    post_count: int = 0
    comment_count: int = 0
    like_count: int = 0


class UserSearchResponse(BaseModel):
    users: list[UserSummaryResponse]
    total: int
    skip: int
    limit: int


class ActivityPostResponse(BaseModel):
    id: uuid.UUID
    title: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ActivityCommentResponse(BaseModel):
    id: uuid.UUID
    post_id: uuid.UUID
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ActivityLikeResponse(BaseModel):
    id: uuid.UUID
    post_id: uuid.UUID
    created_at: datetime

    model_config = {"from_attributes": True}


class UserActivityResponse(BaseModel):
    """Response for GET /users/{id}/activity."""
    recent_posts: list[ActivityPostResponse]
    recent_comments: list[ActivityCommentResponse]
    recent_likes: list[ActivityLikeResponse]

"""
Pydantic schemas for posts.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.user import UserSummaryResponse


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------

class PostCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    image_url: str | None = Field(default=None, max_length=500)


class PostUpdateRequest(BaseModel):
    """Omitted or null fields are left unchanged."""
    title: str | None = Field(default=None, min_length=1, max_length=255)
    content: str | None = Field(default=None, min_length=1)
    image_url: str | None = Field(default=None, max_length=500)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------

class PostResponse(BaseModel):
    id: uuid.UUID
    title: str
    content: str
    image_url: str | None
    author_id: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PostDetailResponse(PostResponse):
    author: UserSummaryResponse | None = None
    comment_count: int = 0
    like_count: int = 0


class PostListResponse(BaseModel):
    posts: list[PostResponse]
    total: int
    skip: int
    limit: int

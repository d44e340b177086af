"""
Pydantic schemas for comments.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.user import UserSummaryResponse


class CommentCreateRequest(BaseModel):
    post_id: uuid.UUID
    content: str = Field(..., min_length=1)


class CommentUpdateRequest(BaseModel):
    content: str = Field(..., min_length=1)


class CommentResponse(BaseModel):
    id: uuid.UUID
    post_id: uuid.UUID
    user_id: str
    content: str
    created_at: datetime
    updated_at: datetime
    author: UserSummaryResponse | None = None

    model_config = {"from_attributes": True}


class CommentListResponse(BaseModel):
    comments: list[CommentResponse]
    total: int

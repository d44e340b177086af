"""
Pydantic schemas for likes.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from app.schemas.user import UserSummaryResponse


class LikeToggleRequest(BaseModel):
    post_id: uuid.UUID


class LikeToggleResponse(BaseModel):
    action: Literal["liked", "unliked"]
    liked: bool
    like_count: int


class LikeStatusResponse(BaseModel):
    liked: bool
    like_count: int
    like_id: uuid.UUID | None = None


class LikeResponse(BaseModel):
    id: uuid.UUID
    post_id: uuid.UUID
    user_id: str
    created_at: datetime
    user: UserSummaryResponse | None = None

    model_config = {"from_attributes": True}


class LikeListResponse(BaseModel):
    likes: list[LikeResponse]
    total: int

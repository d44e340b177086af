"""
User ORM model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.comment import Comment
    from app.models.like import Like
    from app.models.notification import Notification
    from app.models.post import Post


class User(Base, TimestampMixin):
    """A user known to the identity provider. id is the token's `sub` claim."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Relationships
    posts: Mapped[list[Post]] = relationship(
        "Post", back_populates="author", passive_deletes=True
    )
    comments: Mapped[list[Comment]] = relationship(
        "Comment", back_populates="author", passive_deletes=True
    )
    likes: Mapped[list[Like]] = relationship(
        "Like", back_populates="user", passive_deletes=True
    )
    notifications: Mapped[list[Notification]] = relationship(
        "Notification", back_populates="user", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<User id={self.id!r} email={self.email!r}>"

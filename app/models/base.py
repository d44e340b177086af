"""
Base model classes and mixins.

Provides the declarative Base plus id and timestamp mixins.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class CreatedAtMixin:
    """Adds a created_at column filled in by the database on insert."""

    created_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        nullable=False,
        index=True,
        doc="Timestamp when the record was created",
    )


class TimestampMixin(CreatedAtMixin):
    """Adds created_at and an updated_at column refreshed on every update."""

    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        doc="Timestamp when the record was last updated",
    )


class UUIDMixin:
    """
    Adds a UUID primary key generated client-side.

    Users are the exception: their id is the identity provider's subject.
    """

    id: Mapped[UUID] = mapped_column(
        primary_key=True,
        default=uuid4,
        doc="Unique identifier for the record",
    )

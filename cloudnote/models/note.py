"""
CloudNote Backend — Note SQLAlchemy Model
===========================================

What:  ORM model representing the `notes` table.
Why:   Maps Python objects to database rows for type-safe database operations.
Who:   Used by NoteService for CRUD operations and by Alembic for schema management.

Table Design Rationale:
    - UUID primary key: internal identifier, never exposed by the API
    - slug: external identifier, "<title>-<epoch ms>"; regenerated whenever
      the title changes, so clients must follow the slug returned by an update
    - user_id: owner reference, set on insert and never changed afterwards
    - updated_at: drives the "most recently edited first" ordering of listings

    Index on (user_id, updated_at DESC):
        Every listing is "this user's notes, newest edit first".
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from cloudnote.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A note owned by exactly one user.

    Lifecycle:
        1. Created by POST /api/note (slug derived from title + time)
        2. Updated in place by PUT /api/note/{slug}; new title → new slug
        3. Deleted by DELETE /api/note/{slug}; no soft delete, no versions
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    slug: Mapped[str] = mapped_column(
        String(300),
        nullable=False,
        unique=True,
        comment="External identifier: <title>-<epoch milliseconds>",
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    # TEXT: note bodies have no natural length limit
    content: Mapped[str] = mapped_column(Text, nullable=False)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="Owning user; immutable after creation",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("idx_notes_user_updated_at", "user_id", updated_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, slug='{self.slug}', user_id={self.user_id})>"

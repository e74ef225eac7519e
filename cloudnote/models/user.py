"""
CloudNote Backend — User SQLAlchemy Model
===========================================

What:  ORM model representing the `users` table.
Who:   Used by AccountService (signup, login, profile) and NoteService
       (resolving a token identity to a user id).

Table Design Rationale:
    - email is the login identity and the bearer token payload; unique index
    - password_hash holds the bcrypt digest, never the plaintext
    - rows are immutable after signup; the API has no update/delete route
"""

import enum
import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from cloudnote.database import Base


class Gender(str, enum.Enum):
    MALE = "M"
    FEMALE = "F"
    OTHER = "O"


class User(Base):
    """A registered account. Owns zero or more notes."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        unique=True,
        index=True,
        comment="Login identity; also the bearer token subject",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt digest of the password",
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    # Stored as the single-letter code rather than a native enum type
    gender: Mapped[str] = mapped_column(String(1), nullable=False)

    birth_date: Mapped[date] = mapped_column(Date, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"

"""
CloudNote Backend — Note Service
==================================

What:  Create, list, update and delete notes on behalf of an authenticated user.
Why:   Encapsulates ownership rules independent of HTTP concerns.
How:   Every operation first resolves the token identity (email) to a user
       id, then works only on rows carrying that user id.

Ownership Model:
    Listing filters on user_id. Update and delete are single conditional
    statements:

        UPDATE notes SET ... WHERE slug = :slug AND user_id = :uid
        DELETE FROM notes   WHERE slug = :slug AND user_id = :uid

    so the ownership check and the mutation cannot be separated by a
    concurrent request. When no row matched, one follow-up read decides
    between "no such note" (404) and "someone else's note" (401).

Slugs:
    slug = "<title>-<epoch milliseconds>". A title change produces a new
    slug; a content-only change keeps it.
"""

import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cloudnote.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    NotOwnerError,
    NothingToUpdateError,
)
from cloudnote.models.note import Note
from cloudnote.models.user import User
from cloudnote.schemas.note import NoteMutationResponse, NoteSummary

logger = logging.getLogger(__name__)


def _epoch_millis() -> int:
    return int(time.time() * 1000)


def make_slug(title: str, millis: int) -> str:
    return f"{title}-{millis}"


class NoteService:
    """
    Business logic layer for note operations.

    Args:
        clock_ms: Source of epoch milliseconds for slug generation
    """

    def __init__(self, clock_ms: Optional[Callable[[], int]] = None):
        self._clock_ms = clock_ms or _epoch_millis

    def new_slug(self, title: str) -> str:
        return make_slug(title, self._clock_ms())

    async def _resolve_user_id(self, db: AsyncSession, identity: str) -> uuid.UUID:
        """
        Map a verified token identity to the owning user's id.

        A valid token whose user no longer exists is reported as a missing
        user rather than an authentication failure.
        """
        result = await db.execute(select(User.id).where(User.email == identity))
        user_id = result.scalar_one_or_none()
        if user_id is None:
            raise NotFoundError(resource="user")
        return user_id

    async def _raise_missing_or_foreign(self, db: AsyncSession, slug: str) -> None:
        result = await db.execute(select(Note.user_id).where(Note.slug == slug))
        if result.scalar_one_or_none() is None:
            raise NotFoundError(resource="note", resource_id=slug)
        raise NotOwnerError()

    async def create_note(
        self,
        db: AsyncSession,
        identity: str,
        title: str,
        content: str,
    ) -> NoteMutationResponse:
        """
        Persist a new note owned by `identity`.

        Raises:
            NotFoundError: the identity has no backing user
            ConflictError: the generated slug is already taken
            DatabaseError: unexpected persistence failure
        """
        slug = self.new_slug(title)
        try:
            user_id = await self._resolve_user_id(db, identity)
            note = Note(slug=slug, title=title, content=content, user_id=user_id)
            db.add(note)
            await db.flush()
        except IntegrityError:
            await db.rollback()
            raise ConflictError(
                message="A note with the same title was just saved. Please try again.",
                context={"slug": slug},
            )
        except SQLAlchemyError as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "create_note"})

        logger.info("Note %s created by user %s", slug, user_id)
        return NoteMutationResponse(message="Your note saved successfully.", slug=slug)

    async def list_notes(self, db: AsyncSession, identity: str) -> List[NoteSummary]:
        """All notes owned by `identity`, most recently updated first."""
        try:
            user_id = await self._resolve_user_id(db, identity)
            result = await db.execute(
                select(Note)
                .where(Note.user_id == user_id)
                .order_by(Note.updated_at.desc())
            )
            notes = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "list_notes"})

        return [NoteSummary.model_validate(note) for note in notes]

    async def update_note(
        self,
        db: AsyncSession,
        identity: str,
        slug: str,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> NoteMutationResponse:
        """
        Change the title and/or content of one of the caller's notes.

        Returns the note's slug after the update, which differs from `slug`
        whenever a new title was supplied.

        Raises:
            NothingToUpdateError: neither title nor content supplied
            NotFoundError:        no note with this slug (or no backing user)
            NotOwnerError:        the note belongs to another user
        """
        values: Dict[str, object] = {}
        if title:
            values["title"] = title
            values["slug"] = self.new_slug(title)
        if content:
            values["content"] = content
        if not values:
            raise NothingToUpdateError()
        values["updated_at"] = datetime.now(timezone.utc)

        try:
            user_id = await self._resolve_user_id(db, identity)
            result = await db.execute(
                update(Note)
                .where(Note.slug == slug, Note.user_id == user_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await self._raise_missing_or_foreign(db, slug)
        except IntegrityError:
            await db.rollback()
            raise ConflictError(
                message="A note with the same title was just saved. Please try again.",
                context={"slug": values.get("slug")},
            )
        except SQLAlchemyError as e:
            logger.error("Database error updating note %s: %s", slug, str(e), exc_info=True)
            raise DatabaseError(context={"operation": "update_note", "slug": slug})

        new_slug = values.get("slug", slug)
        logger.info("Note %s updated by user %s (slug now %s)", slug, user_id, new_slug)
        return NoteMutationResponse(message="Note updated successfully.", slug=new_slug)

    async def delete_note(self, db: AsyncSession, identity: str, slug: str) -> None:
        """
        Delete one of the caller's notes.

        Raises:
            NotFoundError: no note with this slug (or no backing user)
            NotOwnerError: the note belongs to another user
        """
        try:
            user_id = await self._resolve_user_id(db, identity)
            result = await db.execute(
                delete(Note)
                .where(Note.slug == slug, Note.user_id == user_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await self._raise_missing_or_foreign(db, slug)
        except SQLAlchemyError as e:
            logger.error("Database error deleting note %s: %s", slug, str(e), exc_info=True)
            raise DatabaseError(context={"operation": "delete_note", "slug": slug})

        logger.info("Note %s deleted by user %s", slug, user_id)

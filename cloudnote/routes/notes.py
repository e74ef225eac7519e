"""
CloudNote Backend — Notes Route Handlers
==========================================

What:  Note CRUD for the authenticated user.
How:   Every route depends on require_identity; NoteService enforces ownership.

Routes:
    POST   /api/note          create
    GET    /api/note/notes    list own notes, newest edit first
    PUT    /api/note/{slug}   update title and/or content
    DELETE /api/note/{slug}   delete

The slug segment is declared as a path converter because slugs embed the
note title verbatim, which may contain "/".

Caching:
    Note data is private and mutable, so every response is marked no-store.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from cloudnote.database import get_db_session
from cloudnote.middleware.auth import require_identity
from cloudnote.schemas.common import ErrorResponse, MessageResponse
from cloudnote.schemas.note import (
    NoteCreate,
    NoteMutationResponse,
    NoteSummary,
    NoteUpdate,
)
from cloudnote.services import get_note_service
from cloudnote.services.note_service import NoteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/note", tags=["Notes"])

_AUTH_ERRORS = {
    401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.post(
    "",
    response_model=NoteMutationResponse,
    responses={
        **_AUTH_ERRORS,
        403: {"description": "Missing title or content", "model": ErrorResponse},
        404: {"description": "User no longer exists", "model": ErrorResponse},
    },
    summary="Create a note",
)
async def create_note(
    payload: NoteCreate,
    identity: str = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
    notes: NoteService = Depends(get_note_service),
) -> NoteMutationResponse:
    return await notes.create_note(db, identity, payload.title, payload.content)


@router.get(
    "/notes",
    response_model=List[NoteSummary],
    responses={
        **_AUTH_ERRORS,
        404: {"description": "User no longer exists", "model": ErrorResponse},
    },
    summary="List the caller's notes",
)
async def list_notes(
    response: Response,
    identity: str = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
    notes: NoteService = Depends(get_note_service),
) -> List[NoteSummary]:
    result = await notes.list_notes(db, identity)
    response.headers["Cache-Control"] = "no-store"
    response.headers["X-Total-Count"] = str(len(result))
    return result


@router.put(
    "/{slug:path}",
    response_model=NoteMutationResponse,
    responses={
        **_AUTH_ERRORS,
        400: {"description": "Neither title nor content supplied", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
    },
    summary="Update a note's title and/or content",
)
async def update_note(
    slug: str,
    payload: Optional[NoteUpdate] = None,
    identity: str = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
    notes: NoteService = Depends(get_note_service),
) -> NoteMutationResponse:
    """
    A new title regenerates the slug; the response carries the slug the
    note is reachable under from now on.
    """
    payload = payload or NoteUpdate()
    return await notes.update_note(
        db, identity, slug, title=payload.title, content=payload.content
    )


@router.delete(
    "/{slug:path}",
    response_model=MessageResponse,
    responses={
        **_AUTH_ERRORS,
        404: {"description": "Note not found", "model": ErrorResponse},
    },
    summary="Delete a note",
)
async def delete_note(
    slug: str,
    identity: str = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
    notes: NoteService = Depends(get_note_service),
) -> MessageResponse:
    await notes.delete_note(db, identity, slug)
    return MessageResponse(message="Note deleted successfully.")

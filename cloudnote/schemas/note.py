"""
CloudNote Backend — Note Request/Response Schemas
===================================================

What:  Pydantic models defining the note API contract.
Why:   Strict input validation, automatic serialization, and OpenAPI docs.

Design Decision:
    Schemas are separate from SQLAlchemy models because the API never
    exposes internal fields: note ids and owner ids stay server-side, and
    clients address notes by slug only.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from cloudnote.schemas.auth import CamelModel


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(CamelModel):
    """Body of POST /api/note. Both fields must be non-empty."""
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)


class NoteUpdate(CamelModel):
    """
    Body of PUT /api/note/{slug}.

    Empty strings count as "not supplied"; a request with neither field
    is rejected by NoteService as having nothing to update.
    """
    title: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = Field(default=None)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteSummary(CamelModel):
    """One entry of GET /api/note/notes."""
    slug: str = Field(description="External note identifier")
    title: str
    content: str
    updated_at: datetime = Field(description="Last modification time (UTC)")


class NoteMutationResponse(CamelModel):
    """
    Returned by create and update.

    `slug` is the note's identifier after the operation. An update that
    changes the title also changes the slug, so clients must switch to it.
    """
    message: str
    slug: str

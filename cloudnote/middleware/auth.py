"""
CloudNote Backend — Bearer Authentication Dependency
======================================================

What:  Guards protected routes: extracts the bearer token, verifies it, and
       hands the authenticated identity (the user's email) to the handler.
How:   A FastAPI dependency rather than a Starlette middleware, so only the
       routes that declare it are protected and /health, signup and login
       stay public.
Who:   Declared by every /api/note route and GET /api/auth/userdetails.

Contract:
    Authorization: <scheme> <token>
    - header missing, or no token part    → 401 unauthorized
    - token rejected by the codec         → 401 invalid_token / token_expired
    - otherwise                           → request.state.identity = email
"""

import logging

from fastapi import Request

from cloudnote.exceptions import AuthenticationRequiredError
from cloudnote.services.token_codec import TokenCodec

logger = logging.getLogger(__name__)


def get_token_codec(request: Request) -> TokenCodec:
    """The codec built by create_app() for this application instance."""
    return request.app.state.token_codec


def extract_bearer_token(authorization: str | None) -> str:
    """
    Returns the token part of an Authorization header value.

    Only the two-part shape is checked; the scheme word itself is not
    compared, matching what existing clients send.
    """
    if not authorization:
        raise AuthenticationRequiredError()
    parts = authorization.split(" ")
    if len(parts) < 2 or not parts[1]:
        raise AuthenticationRequiredError()
    return parts[1]


async def require_identity(request: Request) -> str:
    """
    Dependency returning the authenticated identity for this request.

    Usage:
        @router.get("/notes")
        async def list_notes(identity: str = Depends(require_identity)): ...
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    identity = get_token_codec(request).verify(token)
    request.state.identity = identity
    return identity

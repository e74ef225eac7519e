"""
CloudNote Backend — Access Log Middleware
===========================================

One line per request on the `cloudnote.access` logger:

    PUT /api/note/t1-1700000000000 404 3.2ms [a1b2c3d4] bearer

The last field says whether the request reached a handler with a verified
bearer identity (`bearer`) or not (`anon`). The identity itself, request
bodies and the Authorization header are never logged.

/health is skipped so probes don't drown the log.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from cloudnote.middleware.request_id import request_id_var

logger = logging.getLogger("cloudnote.access")

_UNLOGGED_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in _UNLOGGED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        # require_identity sets this only after the token verified
        caller = "bearer" if getattr(request.state, "identity", None) else "anon"
        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms [%s] %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id_var.get(""),
            caller,
        )
        return response

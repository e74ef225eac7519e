"""
CloudNote Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes app configuration, middleware registration, route mounting,
       service construction and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn cloudnote.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────┐ ┌──────┐ │
    │  │  Req ID  │→│  Logging        │→│ GZip │→│ CORS │ │
    │  └──────────┘ └─────────────────┘ └──────┘ └──────┘ │
    │                                                     │
    │  Routes (bearer-protected marked *):                │
    │  /api/auth/signup  /api/auth/login                  │
    │  /api/auth/userdetails*  /api/note*  /health        │
    │                                                     │
    │  app.state: settings, token_codec, account_service, │
    │             note_service                            │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, validate configuration, log listen address
    Shutdown: dispose database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from cloudnote import __version__
from cloudnote.config import Settings, settings
from cloudnote.database import dispose_engine
from cloudnote.exceptions import (
    AuthenticationFailedError,
    AuthenticationRequiredError,
    CloudNoteError,
    InvalidTokenError,
    NotOwnerError,
)
from cloudnote.middleware.logging import RequestLoggingMiddleware
from cloudnote.middleware.request_id import RequestIDMiddleware, request_id_var
from cloudnote.routes import auth, health, notes
from cloudnote.schemas.common import FIELD_ERROR_MESSAGES
from cloudnote.services.account_service import AccountService
from cloudnote.services.note_service import NoteService
from cloudnote.services.passwords import PasswordHasher, PasswordPolicy
from cloudnote.services.token_codec import TokenCodec

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(config: Settings) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries log every operation at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    config: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config)
    logger.info("=" * 60)
    logger.info("CloudNote Backend starting up...")

    try:
        config.validate_required_for_production()
    except ValueError as e:
        # Keep serving: a development setup without a secret still works
        logger.warning("Configuration warning: %s", str(e))

    logger.info("Server ready at http://%s:%d", config.host, config.port)
    logger.info("API docs: http://%s:%d/docs", config.host, config.port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("CloudNote Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details: Optional[dict] = None) -> dict:
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        RequestValidationError          → 403 validation_error (first failing field)
        Auth failures (401 family)      → 401 + WWW-Authenticate: Bearer
        CloudNoteError 4xx              → exception's own status and code
        CloudNoteError 5xx              → generic message, context logged only
        Exception (fallback)            → 500 internal_server_error

    Security: responses never carry stack traces or driver messages.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Body failed schema validation; report the first problem."""
        errors = exc.errors()
        first = errors[0] if errors else {"loc": (), "msg": "Validation failed"}
        field = next(
            (str(part) for part in reversed(first.get("loc", ())) if isinstance(part, str)),
            None,
        )
        message = FIELD_ERROR_MESSAGES.get(field or "", first.get("msg", "Validation failed"))
        logger.warning("[%s] Request validation failed on %s", request_id_var.get(""), field)
        return JSONResponse(
            status_code=403,
            content=_error_body("validation_error", message, {"field": field} if field else None),
        )

    @app.exception_handler(AuthenticationRequiredError)
    @app.exception_handler(InvalidTokenError)
    @app.exception_handler(AuthenticationFailedError)
    @app.exception_handler(NotOwnerError)
    async def handle_unauthorized(request: Request, exc: CloudNoteError):
        """Credential missing, rejected, or not entitled to the resource."""
        logger.warning("[%s] %s: %s", request_id_var.get(""), exc.error_code, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, exc.message),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(CloudNoteError)
    async def handle_app_error(request: Request, exc: CloudNoteError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, exc.error_code, exc.message, exc.context)
            return JSONResponse(
                status_code=exc.status_code,
                content=_error_body(
                    exc.error_code,
                    "An internal error occurred. Please try again later.",
                ),
            )
        logger.warning("[%s] %s: %s", rid, exc.error_code, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, exc.message, exc.context),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all for truly unexpected errors.

        Stack trace is logged server-side only; the client gets the request
        ID to quote in a support ticket.
        """
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def build_services(app: FastAPI, config: Settings) -> None:
    """
    Construct the stateless collaborators once and attach them to app.state.

    The signing secret, bcrypt cost and password policy come from `config`
    here and nowhere else.
    """
    token_codec = TokenCodec(
        secret_key=config.jwt_secret_key,
        algorithm=config.jwt_algorithm,
        ttl_seconds=config.token_ttl_seconds,
    )
    app.state.settings = config
    app.state.token_codec = token_codec
    app.state.account_service = AccountService(
        token_codec=token_codec,
        password_hasher=PasswordHasher(rounds=config.bcrypt_rounds),
        password_policy=PasswordPolicy.from_settings(config),
    )
    app.state.note_service = NoteService()


def create_app(config: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Settings to build the app from; defaults to the module-level
                `settings` loaded from the environment.
    """
    config = config or settings

    app = FastAPI(
        title="CloudNote API",
        description="Note-taking backend with bearer-token authentication.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    build_services(app, config)

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count", "WWW-Authenticate"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(notes.router)
    app.include_router(health.router)

    return app


# uvicorn expects `cloudnote.main:app` to be importable
app = create_app()

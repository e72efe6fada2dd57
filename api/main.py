"""
api/main.py -- FastAPI application entry point for NoteKeeper.

Run with:  python main.py
           uvicorn api.main:app --reload

create_app(settings) builds the application around one explicitly passed
Settings object. Nothing in auth/ or notes/ reads configuration on its own:
the lifespan constructs the password hasher, token service, stores and
services from `settings` and hangs them on app.state, where route handlers
and the auth gate pick them up.

Middleware stack (outermost to innermost; Starlette wraps the most recently
added middleware around the others):
  1. log_requests          -- one access-log line per request
  2. CORSMiddleware        -- adds CORS headers for allowed browser origins
  3. TrustedHostMiddleware -- rejects requests with unexpected Host headers

Exception handlers render every failure in the shared envelope
(api/responses.py). Internal details of unexpected errors are logged, never
returned.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import HealthResponse
from api.responses import failure
from api.routes.auth import router as auth_router
from api.routes.notes import router as notes_router
from auth.passwords import PasswordHasher
from auth.service import AuthService
from auth.store import UserStore
from auth.tokens import TokenService
from core.config import Settings, get_settings
from core.exceptions import InternalError, NoteKeeperError, ValidationError
from core.logging import setup_logging
from notes.service import NoteService
from notes.store import NoteStore

VERSION = "1.0.0"

logger = logging.getLogger("notekeeper.api")


# ---------------------------------------------------------------------------
# Lifespan -- startup / shutdown
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build every request-time collaborator from app.state.settings.

    Everything before yield runs on startup; everything after yield runs on
    shutdown. The secret key and hasher are read-only for the life of the
    process.
    """
    settings: Settings = app.state.settings
    logger.info("NoteKeeper API starting up")

    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    tokens = TokenService(settings.secret_key, settings.token_expire_seconds)
    user_store = UserStore(settings.database_url)
    note_store = NoteStore(settings.database_url)
    logger.info("Connected to database")

    app.state.tokens = tokens
    app.state.user_store = user_store
    app.state.note_store = note_store
    app.state.auth_service = AuthService(user_store, hasher, tokens)
    app.state.note_service = NoteService(note_store, ownership_forbidden=settings.ownership_forbidden)
    logger.info(
        "Auth initialized (token_expire_seconds=%d, ownership_forbidden=%s)",
        settings.token_expire_seconds,
        settings.ownership_forbidden,
    )

    yield

    note_store.close()
    user_store.close()
    logger.info("NoteKeeper API shutdown complete")


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same envelope so API clients can parse errors
# uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------


async def notekeeper_error_handler(request: Request, exc: NoteKeeperError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.name)
    return failure(exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 with one {field, msg} entry per failed field."""
    details = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        details.append({"field": ".".join(loc) or "body", "msg": err.get("msg", "Invalid value")})
    logger.error("Error: 400 - Validation error on %s %s", request.method, request.url.path)
    return failure(ValidationError(details=details))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap Starlette HTTP errors (unknown route, wrong method) in the envelope."""
    error = NoteKeeperError(str(exc.detail))
    error.status_code = exc.status_code
    try:
        error.name = HTTPStatus(exc.status_code).phrase
    except ValueError:
        error.name = f"HTTP {exc.status_code}"
    response = failure(error)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception goes to the log only. The client receives the
    generic InternalError message.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return failure(InternalError())


# ---------------------------------------------------------------------------
# Request logging middleware
# ---------------------------------------------------------------------------


async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Assemble the NoteKeeper FastAPI application.

    `settings` defaults to the get_settings() singleton. Tests pass their
    own instance to point the app at an isolated database.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Personal notes behind stateless token authentication.",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.allowed_hosts)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization", settings.token_header],
        max_age=3600,
    )
    app.middleware("http")(log_requests)

    app.add_exception_handler(NoteKeeperError, notekeeper_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(auth_router, tags=["Auth"])
    app.include_router(notes_router, tags=["Notes"])

    @app.get("/", include_in_schema=False)
    async def root() -> PlainTextResponse:
        return PlainTextResponse("Hello World!")

    @app.get("/api/health", tags=["Health"])
    async def health() -> HealthResponse:
        """Return API liveness and current version. No auth required."""
        return HealthResponse(version=VERSION)

    return app


app = create_app()

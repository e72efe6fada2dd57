"""
auth/dependencies.py -- FastAPI Depends() helper that gates authenticated routes.

Two header forms are accepted, checked in priority order:
  1. The designated token header (Settings.token_header, "auth-token" by
     default) -- what the existing web client sends.
  2. Authorization: Bearer <token> -- for generic API clients.

get_current_user_id() verifies the token statelessly through the
TokenService on app.state and never touches a store: the user id inside a
valid token is trusted as-is. Routes that need the user record (getuser)
load it themselves and answer 404 if it has gone.

Layer rule: no imports from api/ or notes/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

import logging

from fastapi import Request

from auth.tokens import TokenService
from core.exceptions import TokenInvalidError, TokenMissingError

logger = logging.getLogger("notekeeper.auth")


def extract_token(request: Request, header_name: str) -> str | None:
    """Return the raw token from the request headers, or None if absent."""
    token = request.headers.get(header_name, "").strip()
    if token:
        return token
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None


def get_current_user_id(request: Request) -> str:
    """Require a valid token. Raises 401 AuthenticationError otherwise.

    On success the user id is also stored on request.state.user_id for
    middleware and logging.

    Use as a FastAPI dependency:
        @router.get("/protected")
        async def route(user_id: str = Depends(get_current_user_id)): ...
    """
    tokens: TokenService = request.app.state.tokens
    header_name: str = request.app.state.settings.token_header

    token = extract_token(request, header_name)
    if token is None:
        logger.error("Authentication token missing")
        raise TokenMissingError()

    try:
        claims = tokens.verify(token)
    except TokenInvalidError as exc:
        logger.error("Invalid token: %s", exc.reason)
        raise

    request.state.user_id = claims.user_id
    return claims.user_id

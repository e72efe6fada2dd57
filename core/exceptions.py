"""
core/exceptions.py -- Error taxonomy shared by every NoteKeeper layer.

Each error carries the HTTP status it maps to, a stable name that clients
can switch on, and a human-readable message. Components raise these; the
exception handlers in api/main.py turn them into the response envelope.

Messages for credential failures are deliberately generic so responses do
not reveal whether an email address is registered.

Layer rule: core/ is the kernel. This module may not import from api/,
auth/ or notes/.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError


class NoteKeeperError(Exception):
    """Base exception for all NoteKeeper errors."""

    status_code: int = 500
    name: str = "InternalError"
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[list[dict[str, Any]]] = None) -> None:
        self.message = message or self.default_message
        self.details = details or []
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the `error` member of the failure envelope."""
        body: dict[str, Any] = {"code": self.status_code, "name": self.name, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(NoteKeeperError):
    """Request body failed shape validation."""

    status_code = 400
    name = "ValidationError"
    default_message = "Validation error"


class DuplicateEmailError(NoteKeeperError):
    status_code = 400
    name = "DuplicateEmail"
    default_message = "Email is already in use"


class InvalidCredentialsError(NoteKeeperError):
    """Unknown email and wrong password both raise this, with one message."""

    status_code = 400
    name = "InvalidCredentials"
    default_message = "Incorrect email or password"


class AuthenticationError(NoteKeeperError):
    """The caller could not be identified, or may not act on the resource."""

    status_code = 401
    name = "AuthenticationError"
    default_message = "Authentication error. Please log in again."


class TokenMissingError(AuthenticationError):
    default_message = "Authentication token is missing. Please log in."


class TokenInvalidError(AuthenticationError):
    """Bad signature, malformed structure, or expired token.

    `reason` is for server-side logs only and never reaches the client.
    """

    default_message = "Invalid token. Please log in again."

    def __init__(self, reason: str = "", message: Optional[str] = None) -> None:
        super().__init__(message)
        self.reason = reason


class OwnershipError(AuthenticationError):
    """Authenticated caller does not own the resource (historical 401 shape)."""


class ForbiddenError(NoteKeeperError):
    status_code = 403
    name = "ForbiddenError"
    default_message = "You do not have permission to access this resource."


class NotFoundError(NoteKeeperError):
    status_code = 404
    name = "NotFound"
    default_message = "Resource not found"


class InternalError(NoteKeeperError):
    """Unexpected store or runtime failure. Details go to the log only."""


@contextmanager
def store_errors(log: logging.Logger, action: str) -> Iterator[None]:
    """Convert SQLAlchemy failures raised inside the block into InternalError.

    The original exception is logged with its traceback and chained, so the
    client only ever sees the generic 500 message.

        with store_errors(logger, "creating note"):
            note_id = store.create_note(note)
    """
    try:
        yield
    except SQLAlchemyError as exc:
        log.exception("Error %s", action)
        raise InternalError() from exc

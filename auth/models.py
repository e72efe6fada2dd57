"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in notes/models.py -- dataclasses own domain shape; stores and services do
the work.

Layer rule: no imports from api/ or notes/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered NoteKeeper account.

    email is stored trimmed and lowercased; UserStore normalizes it on every
    write and lookup, so two spellings of one address can never coexist.

    hashed_password is always a bcrypt hash. The raw password never reaches
    this object.

    id is None before the record is written to the database.
    """

    name: str
    email: str
    hashed_password: str
    id: str | None = None
    created_at: str = ""  # ISO 8601, set by store on insert


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried inside a verified access token.

    Only user_id is trusted for authorization. name and email are copied in
    at issue time for the client's convenience and may be stale; callers
    that need fresh values must re-read the user from the store.
    """

    user_id: str
    name: str = ""
    email: str = ""
    issued_at: float = 0.0
    expires_at: float = 0.0

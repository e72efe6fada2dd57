"""
API request and response models for NoteKeeper REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
notes/models.py, which own the internal domain representation. Route
handlers map between the two.

Every response is wrapped in the same envelope:

    {"statusCode": 200, "status": "success", "data": {"records": {...}}}
    {"statusCode": 4xx, "status": "failure", "data": {}, "error": {...}}
"""

import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auth.models import User
from notes.models import Note

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Loose on purpose: something@something.tld
EMAIL_PATTERN = re.compile(r"^.+@.+\..+$")

_BCRYPT_MAX_BYTES = 72


def _check_password(value: str) -> str:
    if len(value.encode("utf-8")) > _BCRYPT_MAX_BYTES:
        raise ValueError(f"Password must be at most {_BCRYPT_MAX_BYTES} bytes long")
    return value


def _check_email(value: str) -> str:
    value = value.strip().lower()
    if not value:
        raise ValueError("Email is required")
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email format")
    return value


# ---------------------------------------------------------------------------
# Auth request models
# ---------------------------------------------------------------------------


class CreateUserRequest(BaseModel):
    """Request body for POST /api/auth/createuser."""

    name: str = Field(min_length=2, max_length=255)
    email: str = Field(max_length=255)
    password: str = Field(min_length=6)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password(value)


class LoginRequest(BaseModel):
    """Request body for POST /api/auth/login."""

    email: str = Field(max_length=255)
    password: str = Field(min_length=6)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password(value)


# ---------------------------------------------------------------------------
# Note request models
# ---------------------------------------------------------------------------


class NoteCreate(BaseModel):
    """Request body for POST /api/notes/addnote. tag defaults to "General"."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    tag: Optional[str] = None


class NoteUpdate(BaseModel):
    """Request body for PUT /api/notes/updatenote/{id}. Every field is optional."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = None
    description: Optional[str] = None
    tag: Optional[str] = None


# ---------------------------------------------------------------------------
# Record models
# ---------------------------------------------------------------------------


class UserOut(BaseModel):
    """Public view of a user. There is deliberately no password field."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str
    date: str

    @classmethod
    def from_user(cls, user: User) -> "UserOut":
        return cls(id=user.id, name=user.name, email=user.email, date=user.created_at)


class NoteOut(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    user: str
    title: str
    description: str
    tag: str
    date: str

    @classmethod
    def from_note(cls, note: Note) -> "NoteOut":
        return cls(
            id=note.id,
            user=note.user_id,
            title=note.title,
            description=note.description,
            tag=note.tag,
            date=note.created_at,
        )


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: int
    name: str
    message: str
    details: Optional[list[dict[str, Any]]] = None


class Envelope(BaseModel):
    """Top-level body of every JSON response."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    status: str
    data: dict[str, Any] = Field(default_factory=dict)
    error: Optional[ErrorDetail] = None

    def to_json(self) -> dict[str, Any]:
        body: dict[str, Any] = {"statusCode": self.status_code, "status": self.status, "data": self.data}
        if self.error is not None:
            body["error"] = self.error.model_dump(exclude_none=True)
        return body


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str

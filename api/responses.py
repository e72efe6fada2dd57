"""
api/responses.py -- Builders for the NoteKeeper response envelope.

Route handlers call success(); the exception handlers in api/main.py call
failure(). Nothing else constructs response bodies, so every endpoint
answers in exactly the same shape.
"""

from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse

from api.models import Envelope, ErrorDetail
from core.exceptions import AuthenticationError, NoteKeeperError


def success(records: dict[str, Any], status_code: int = 200) -> JSONResponse:
    """Wrap `records` as data.records in a success envelope."""
    body = Envelope(status_code=status_code, status="success", data={"records": records})
    return JSONResponse(status_code=status_code, content=body.to_json())


def failure(exc: NoteKeeperError) -> JSONResponse:
    """Render a NoteKeeperError as a failure envelope.

    401 responses carry data.redirectUrl so the web client knows to send
    the user back to the login page.
    """
    data: dict[str, Any] = {"redirectUrl": ""} if isinstance(exc, AuthenticationError) else {}
    body = Envelope(
        status_code=exc.status_code,
        status="failure",
        data=data,
        error=ErrorDetail(**exc.to_dict()),
    )
    return JSONResponse(status_code=exc.status_code, content=body.to_json())

"""
api/routes/notes.py -- Note CRUD for the logged-in user.

Routes:
  GET    /api/notes/fetchallnotes         -- every note owned by the caller
  POST   /api/notes/addnote               -- create a note
  PUT    /api/notes/updatenote/{note_id}  -- change title/description/tag
  DELETE /api/notes/deletenote/{note_id}  -- remove a note

All routes require authentication. The gate dependency runs before body
validation, so an unauthenticated request gets 401 even with a bad body.
Update and delete answer 404 for an unknown id and then apply the
ownership guard (NoteService).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import NoteCreate, NoteOut, NoteUpdate
from api.responses import success
from auth.dependencies import get_current_user_id
from notes.service import NoteService

router = APIRouter(prefix="/api/notes")


@router.get("/fetchallnotes")
def fetch_all_notes(request: Request, user_id: str = Depends(get_current_user_id)) -> JSONResponse:
    service: NoteService = request.app.state.note_service
    notes = service.list_notes(user_id)
    records: dict = {"notes": [NoteOut.from_note(n).model_dump() for n in notes]}
    if not notes:
        records["msg"] = "No notes found"
    return success(records)


@router.post("/addnote")
def add_note(request: Request, body: NoteCreate, user_id: str = Depends(get_current_user_id)) -> JSONResponse:
    service: NoteService = request.app.state.note_service
    note = service.add_note(user_id, body.title, body.description, body.tag)
    return success({"note": NoteOut.from_note(note).model_dump()})


@router.put("/updatenote/{note_id}")
def update_note(
    request: Request,
    note_id: str,
    body: Optional[NoteUpdate] = None,
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    """Apply the non-empty fields of the body to an owned note."""
    service: NoteService = request.app.state.note_service
    changes = body or NoteUpdate()
    note = service.update_note(
        user_id, note_id, title=changes.title, description=changes.description, tag=changes.tag
    )
    return success({"note": NoteOut.from_note(note).model_dump()})


@router.delete("/deletenote/{note_id}")
def delete_note(request: Request, note_id: str, user_id: str = Depends(get_current_user_id)) -> JSONResponse:
    service: NoteService = request.app.state.note_service
    service.delete_note(user_id, note_id)
    return success({"msg": "Note has been deleted successfully"})

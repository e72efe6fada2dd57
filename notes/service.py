"""
notes/service.py -- Note workflows for an authenticated user.

Every mutation follows the same order:
  1. load the note        -> 404 NotFoundError if it does not exist
  2. assert_owner()       -> 401 OwnershipError (or 403 when configured)
  3. apply the change

The caller's user id always comes from the auth gate, never from the
request body, so a note is created for and owned by whoever is logged in.
"""

import logging
from typing import Optional

from auth.ownership import assert_owner
from core.exceptions import NotFoundError, store_errors
from notes.models import Note
from notes.store import NoteStore

logger = logging.getLogger("notekeeper.notes")


class NoteService:
    def __init__(self, store: NoteStore, ownership_forbidden: bool = False) -> None:
        self.store = store
        self.ownership_forbidden = ownership_forbidden

    def _load_owned(self, user_id: str, note_id: str) -> Note:
        note = self.store.get_note(note_id)
        if note is None:
            logger.error("Note not found")
            raise NotFoundError("Note not found")
        assert_owner(user_id, note, forbidden=self.ownership_forbidden)
        return note

    def list_notes(self, user_id: str) -> list[Note]:
        with store_errors(logger, "fetching notes"):
            notes = self.store.list_notes(user_id)
        if notes:
            logger.info("Note(s) fetched successfully")
        else:
            logger.info("No notes found")
        return notes

    def add_note(self, user_id: str, title: str, description: str, tag: Optional[str] = None) -> Note:
        with store_errors(logger, "creating note"):
            note_id = self.store.create_note(Note(user_id=user_id, title=title, description=description, tag=tag))
            note = self.store.get_note(note_id)
        logger.info("Note created successfully")
        return note

    def update_note(
        self,
        user_id: str,
        note_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        tag: Optional[str] = None,
    ) -> Note:
        """Change the given fields of an owned note.

        Empty or missing values leave the field as it is.
        """
        changes = {k: v for k, v in (("title", title), ("description", description), ("tag", tag)) if v and v.strip()}
        with store_errors(logger, "updating note"):
            note = self._load_owned(user_id, note_id)
            updated = self.store.update_note(note.id, **changes)
        if updated is None:
            # Deleted between the ownership check and the update.
            raise NotFoundError("Note not found")
        logger.info("Note updated successfully")
        return updated

    def delete_note(self, user_id: str, note_id: str) -> None:
        with store_errors(logger, "deleting note"):
            note = self._load_owned(user_id, note_id)
            deleted = self.store.delete_note(note.id)
        if not deleted:
            raise NotFoundError("Note not found")
        logger.info("Note deleted successfully")

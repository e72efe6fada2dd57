"""
notes/models.py -- Domain dataclass for a user's note.

Pure data container. Ownership rules live in auth/ownership.py and the
update/delete workflow in notes/service.py.
"""

from dataclasses import dataclass
from typing import Optional

DEFAULT_TAG = "General"


@dataclass
class Note:
    """A text note owned by exactly one user.

    user_id is fixed when the note is created. NoteStore.update_note() has
    no way to change it.

    id is None before the record is written to the database.
    """

    user_id: str
    title: str
    description: str
    tag: str = DEFAULT_TAG
    id: Optional[str] = None
    created_at: str = ""  # ISO 8601, set by store on insert

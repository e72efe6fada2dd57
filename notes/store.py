"""
notes/store.py -- SQLAlchemy-backed persistence layer for notes.

Uses SQLAlchemy Core (not ORM) so the Note dataclass in notes/models.py
remains the authoritative domain representation. Swapping SQLite for
PostgreSQL is a connection string change.

Pattern: Repository + Data Mapper. NoteStore is the repository; _row_to_note
is the mapper. Every method is a single statement on its own connection --
there is no transaction spanning "load, check owner, update".

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = NoteStore("sqlite:///notekeeper.db")
    note_id = store.create_note(Note(user_id=uid, title="T", description="D"))
    store.list_notes(uid)
    store.update_note(note_id, title="New title")
    store.delete_note(note_id)
    store.close()
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Index, MetaData, String, Table, Text, create_engine, event
from sqlalchemy.engine import Engine

from notes.models import DEFAULT_TAG, Note

# Only these columns may change after creation. user_id is not among them.
_UPDATABLE_FIELDS = frozenset({"title", "description", "tag"})

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_notes = Table(
    "notes",
    metadata,
    Column("id", String(32), primary_key=True),
    Column("user_id", String(32), nullable=False),
    Column("title", Text, nullable=False),
    Column("description", Text, nullable=False),
    Column("tag", String(255), nullable=False, server_default=DEFAULT_TAG),
    Column("created_at", String(32), nullable=False),
    Index("ix_notes_user_id", "user_id"),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def normalize_tag(tag: Optional[str]) -> str:
    """Trim the tag; a missing or blank tag becomes DEFAULT_TAG."""
    cleaned = (tag or "").strip()
    return cleaned or DEFAULT_TAG


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class NoteStore:
    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            # FastAPI runs sync handlers in a thread pool, so one pooled
            # connection may be used from several threads.
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        metadata.create_all(self.engine)

    def create_note(self, note: Note) -> str:
        """Insert a new note and return its assigned id."""
        if not note.user_id:
            raise ValueError("a note must have an owner")
        note_id = uuid.uuid4().hex
        with self.engine.connect() as conn:
            conn.execute(
                _notes.insert().values(
                    id=note_id,
                    user_id=note.user_id,
                    title=note.title.strip(),
                    description=note.description.strip(),
                    tag=normalize_tag(note.tag),
                    created_at=_now_iso(),
                )
            )
            conn.commit()
        return note_id

    def get_note(self, note_id: str) -> Optional[Note]:
        """Return the note with this id, or None."""
        with self.engine.connect() as conn:
            row = conn.execute(_notes.select().where(_notes.c.id == note_id)).fetchone()
        return _row_to_note(row) if row is not None else None

    def list_notes(self, user_id: str) -> list[Note]:
        """Return every note owned by user_id, oldest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _notes.select().where(_notes.c.user_id == user_id).order_by(_notes.c.created_at, _notes.c.id)
            ).fetchall()
        return [_row_to_note(r) for r in rows]

    def update_note(self, note_id: str, **fields) -> Optional[Note]:
        """Apply title/description/tag changes and return the updated note.

        Raises ValueError for any other field name (user_id included).
        Returns None if note_id does not exist. With no fields, returns the
        note unchanged.
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)!r}")
        values = {k: v.strip() for k, v in fields.items()}
        if "tag" in values:
            values["tag"] = normalize_tag(values["tag"])
        if values:
            with self.engine.connect() as conn:
                conn.execute(_notes.update().where(_notes.c.id == note_id).values(**values))
                conn.commit()
        return self.get_note(note_id)

    def delete_note(self, note_id: str) -> bool:
        """Delete a note. Returns True if a row was removed."""
        with self.engine.connect() as conn:
            result = conn.execute(_notes.delete().where(_notes.c.id == note_id))
            conn.commit()
        return result.rowcount > 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern -- DB row -> domain dataclass)
# ---------------------------------------------------------------------------


def _row_to_note(row) -> Note:
    return Note(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        description=row.description,
        tag=row.tag,
        created_at=row.created_at,
    )

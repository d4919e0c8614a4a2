"""
Database module for snownotes.

SQLite storage for notes and hint state, plus an in-memory stand-in
with the same interface for previews and throwaway sessions.
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator, Protocol

from snownotes.config import get_db_path
from snownotes.errors import PersistenceError
from snownotes.models import Note

logger = logging.getLogger(__name__)

# Schema version for migrations
SCHEMA_VERSION = 1

SCHEMA = """
-- Schema version tracking
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);

-- Notes
CREATE TABLE IF NOT EXISTS notes (
    id TEXT PRIMARY KEY,                    -- uuid4 hex
    title TEXT NOT NULL,
    body TEXT NOT NULL,
    created_at TEXT NOT NULL,               -- ISO 8601, UTC
    modified_at TEXT NOT NULL
);

-- Onboarding hint state
CREATE TABLE IF NOT EXISTS hints (
    id TEXT PRIMARY KEY,
    display_count INTEGER NOT NULL DEFAULT 0,
    invalidated INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_notes_modified ON notes(modified_at);
"""


class NoteBackend(Protocol):
    """Durable storage the note store writes through."""

    def get_notes(self) -> list[Note]: ...

    def insert_note(self, note: Note) -> None: ...

    def update_note(self, note: Note) -> None: ...

    def delete_notes(self, note_ids: Iterable[str]) -> int: ...

    def delete_all_notes(self) -> int: ...


class Database:
    """SQLite database wrapper for snownotes."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()
        self._ensure_db()

    def _ensure_db(self) -> None:
        """Ensure database exists and schema is current."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"Cannot create data directory: {e}") from e

        with self._connect() as conn:
            conn.executescript(SCHEMA)
            conn.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (SCHEMA_VERSION,)
            )
        logger.debug("Database ready at %s", self.db_path)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """
        Context manager for database connections.

        Commits on success, rolls back on any error. SQLite failures
        surface as PersistenceError.
        """
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot open database {self.db_path}: {e}") from e

        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise PersistenceError(f"Database error: {e}") from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    # Notes

    def get_notes(self) -> list[Note]:
        """Get all notes, most recently modified first."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM notes ORDER BY modified_at DESC"
            ).fetchall()
            return [Note.from_row(row) for row in rows]

    def get_note(self, note_id: str) -> Note | None:
        """Get a single note by ID."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM notes WHERE id = ?", (note_id,)
            ).fetchone()
            if row:
                return Note.from_row(row)
        return None

    def insert_note(self, note: Note) -> None:
        """Insert a new note."""
        with self._connect() as conn:
            conn.execute("""
                INSERT INTO notes (id, title, body, created_at, modified_at)
                VALUES (:id, :title, :body, :created_at, :modified_at)
            """, note.to_row())

    def update_note(self, note: Note) -> None:
        """
        Write a note's title, body and modified_at.

        Inserts the row if it is missing, so an update can repair an
        earlier failed insert. created_at of an existing row is kept.
        """
        with self._connect() as conn:
            conn.execute("""
                INSERT INTO notes (id, title, body, created_at, modified_at)
                VALUES (:id, :title, :body, :created_at, :modified_at)
                ON CONFLICT(id) DO UPDATE SET
                    title = excluded.title,
                    body = excluded.body,
                    modified_at = excluded.modified_at
            """, note.to_row())

    def delete_notes(self, note_ids: Iterable[str]) -> int:
        """Delete notes by ID in one transaction. Returns rows removed."""
        note_ids = list(note_ids)
        if not note_ids:
            return 0

        with self._connect() as conn:
            cursor = conn.executemany(
                "DELETE FROM notes WHERE id = ?",
                [(note_id,) for note_id in note_ids]
            )
            return cursor.rowcount

    def delete_all_notes(self) -> int:
        """Delete every note. Returns rows removed."""
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM notes")
            return cursor.rowcount

    # Hints

    def get_hint_state(self, hint_id: str) -> dict[str, Any]:
        """Get display count and invalidation flag for a hint."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT display_count, invalidated FROM hints WHERE id = ?",
                (hint_id,)
            ).fetchone()
            if row:
                return {
                    "display_count": row["display_count"],
                    "invalidated": bool(row["invalidated"]),
                }
        return {"display_count": 0, "invalidated": False}

    def record_hint_display(self, hint_id: str) -> None:
        """Bump a hint's display count."""
        with self._connect() as conn:
            conn.execute("""
                INSERT INTO hints (id, display_count) VALUES (?, 1)
                ON CONFLICT(id) DO UPDATE SET display_count = display_count + 1
            """, (hint_id,))

    def invalidate_hint(self, hint_id: str) -> None:
        """Mark a hint as no longer needed."""
        with self._connect() as conn:
            conn.execute("""
                INSERT INTO hints (id, invalidated) VALUES (?, 1)
                ON CONFLICT(id) DO UPDATE SET invalidated = 1
            """, (hint_id,))

    def reset_hints(self) -> None:
        """Forget all hint state."""
        with self._connect() as conn:
            conn.execute("DELETE FROM hints")

    def get_stats(self) -> dict[str, Any]:
        """Get database statistics."""
        with self._connect() as conn:
            total = conn.execute("SELECT COUNT(*) FROM notes").fetchone()[0]
            oldest = conn.execute("SELECT MIN(created_at) FROM notes").fetchone()[0]
            latest = conn.execute("SELECT MAX(modified_at) FROM notes").fetchone()[0]

            return {
                "total_notes": total,
                "oldest_created": oldest,
                "last_modified": latest,
            }


class MemoryDatabase:
    """
    Volatile stand-in for Database.

    Nothing survives the process. Used for the "memory" backend and in tests.
    """

    def __init__(self) -> None:
        self._notes: dict[str, Note] = {}
        self._hints: dict[str, dict[str, Any]] = {}

    def get_notes(self) -> list[Note]:
        return sorted(self._notes.values(), key=lambda n: n.modified_at, reverse=True)

    def get_note(self, note_id: str) -> Note | None:
        return self._notes.get(note_id)

    def insert_note(self, note: Note) -> None:
        if note.id in self._notes:
            raise PersistenceError(f"Duplicate note id: {note.id}", note=note)
        self._notes[note.id] = note

    def update_note(self, note: Note) -> None:
        existing = self._notes.get(note.id)
        if existing is not None:
            note = note.model_copy(update={"created_at": existing.created_at})
        self._notes[note.id] = note

    def delete_notes(self, note_ids: Iterable[str]) -> int:
        removed = 0
        for note_id in note_ids:
            if self._notes.pop(note_id, None) is not None:
                removed += 1
        return removed

    def delete_all_notes(self) -> int:
        removed = len(self._notes)
        self._notes.clear()
        return removed

    def get_hint_state(self, hint_id: str) -> dict[str, Any]:
        return dict(self._hints.get(hint_id, {"display_count": 0, "invalidated": False}))

    def record_hint_display(self, hint_id: str) -> None:
        state = self._hints.setdefault(hint_id, {"display_count": 0, "invalidated": False})
        state["display_count"] += 1

    def invalidate_hint(self, hint_id: str) -> None:
        state = self._hints.setdefault(hint_id, {"display_count": 0, "invalidated": False})
        state["invalidated"] = True

    def reset_hints(self) -> None:
        self._hints.clear()

    def get_stats(self) -> dict[str, Any]:
        notes = list(self._notes.values())
        return {
            "total_notes": len(notes),
            "oldest_created": min((n.created_at.isoformat() for n in notes), default=None),
            "last_modified": max((n.modified_at.isoformat() for n in notes), default=None),
        }

"""
Note store for snownotes.

The store owns the note collection. It keeps an in-memory copy for
readers, writes every mutation through to a backend (SQLite by default)
and tells subscribers when the collection changes.

Timestamp rules:
- A new note has created_at == modified_at.
- modified_at moves only when an update actually changes title or body,
  and never moves backwards.
"""

import logging
import threading
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterable

from snownotes.config import DB_FILENAME, DEFAULT_BODY, DEFAULT_TITLE, load_config
from snownotes.db import Database, MemoryDatabase, NoteBackend
from snownotes.errors import AmbiguousIdError, NotFoundError, PersistenceError
from snownotes.models import Note

logger = logging.getLogger(__name__)


class ChangeKind(str, Enum):
    """What happened to the collection."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    CLEARED = "cleared"
    RELOADED = "reloaded"


@dataclass(frozen=True)
class NoteChange:
    """Notification payload passed to subscribers."""

    kind: ChangeKind
    ids: tuple[str, ...] = ()


Subscriber = Callable[[NoteChange], None]


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class NoteStore:
    """Sole owner of the note collection and its persistence."""

    def __init__(
        self,
        backend: NoteBackend,
        clock: Callable[[], datetime] | None = None,
        default_title: str = DEFAULT_TITLE,
        default_body: str = DEFAULT_BODY,
    ):
        self.backend = backend
        self.default_title = default_title
        self.default_body = default_body
        self._clock = clock or utcnow
        self._lock = threading.RLock()
        self._retired: set[str] = set()
        self._subscribers: list[Subscriber] = []
        self._notes: dict[str, Note] = {note.id: note for note in backend.get_notes()}

    def __len__(self) -> int:
        return len(self._notes)

    def __contains__(self, note_id: object) -> bool:
        return note_id in self._notes

    # Reads

    def list(self) -> list[Note]:
        """All notes, most recently modified first."""
        with self._lock:
            notes = list(self._notes.values())
        return sorted(notes, key=lambda n: (n.modified_at, n.created_at), reverse=True)

    def get(self, note_id: str) -> Note:
        """Get a single note. Raises NotFoundError if absent."""
        with self._lock:
            note = self._notes.get(note_id)
        if note is None:
            raise NotFoundError(note_id)
        return note

    def resolve(self, id_or_prefix: str) -> str:
        """
        Expand a unique ID prefix to the full note ID.

        Raises NotFoundError if nothing matches, AmbiguousIdError if
        the prefix matches more than one note.
        """
        with self._lock:
            if id_or_prefix in self._notes:
                return id_or_prefix
            matches = [nid for nid in self._notes if nid.startswith(id_or_prefix)]

        if not id_or_prefix or not matches:
            raise NotFoundError(id_or_prefix)
        if len(matches) > 1:
            raise AmbiguousIdError(id_or_prefix, len(matches))
        return matches[0]

    # Mutations

    def create(self, title: str | None = None, body: str | None = None) -> Note:
        """
        Add a new note, using the placeholders for omitted fields.

        If the write fails the note stays in memory until the next
        reload() and PersistenceError is raised.
        """
        with self._lock:
            now = self._now()
            note = Note(
                id=self._new_id(),
                title=self.default_title if title is None else title,
                body=self.default_body if body is None else body,
                created_at=now,
                modified_at=now,
            )
            self._notes[note.id] = note
            error = self._write(self.backend.insert_note, note, note=note)

        logger.debug("Created note %s", note.id)
        self._notify(NoteChange(ChangeKind.CREATED, (note.id,)))
        if error:
            raise error
        return note

    def update(
        self,
        note_id: str,
        title: str | None = None,
        body: str | None = None,
    ) -> Note:
        """
        Change a note's title and/or body.

        Fields left as None, or equal to the stored value, are not
        changes. When nothing changes the note is returned as-is and
        modified_at is left alone.
        """
        with self._lock:
            current = self._notes.get(note_id)
            if current is None:
                raise NotFoundError(note_id)

            changes: dict[str, Any] = {}
            if title is not None and title != current.title:
                changes["title"] = title
            if body is not None and body != current.body:
                changes["body"] = body
            if not changes:
                return current

            changes["modified_at"] = max(self._now(), current.modified_at)
            note = current.model_copy(update=changes)
            self._notes[note_id] = note
            error = self._write(self.backend.update_note, note, note=note)

        logger.debug("Updated note %s (%s)", note_id, ", ".join(sorted(changes)))
        self._notify(NoteChange(ChangeKind.UPDATED, (note_id,)))
        if error:
            raise error
        return note

    def delete(self, note_id: str) -> None:
        """Remove a note permanently. Raises NotFoundError if absent."""
        with self._lock:
            note = self._notes.pop(note_id, None)
            if note is None:
                raise NotFoundError(note_id)
            self._retired.add(note_id)
            error = self._write(self.backend.delete_notes, [note_id], note=note)

        logger.debug("Deleted note %s", note_id)
        self._notify(NoteChange(ChangeKind.DELETED, (note_id,)))
        if error:
            raise error

    def delete_many(self, note_ids: Iterable[str]) -> None:
        """
        Remove several notes in one unit of work.

        Every known ID is removed. Unknown IDs are reported afterwards
        through NotFoundError; the removals are not undone.
        """
        requested = list(dict.fromkeys(note_ids))

        with self._lock:
            found = [nid for nid in requested if nid in self._notes]
            missing = [nid for nid in requested if nid not in self._notes]
            for nid in found:
                del self._notes[nid]
            self._retired.update(found)
            error = self._write(self.backend.delete_notes, found) if found else None

        if found:
            logger.debug("Deleted %d notes", len(found))
            self._notify(NoteChange(ChangeKind.DELETED, tuple(found)))
        if error:
            if missing:
                logger.warning("Also not found: %s", ", ".join(missing))
            raise error
        if missing:
            raise NotFoundError(missing)

    def delete_all(self) -> None:
        """Empty the collection. Irreversible."""
        with self._lock:
            removed = tuple(self._notes)
            self._notes.clear()
            self._retired.update(removed)
            error = self._write(self.backend.delete_all_notes)

        logger.info("Deleted all notes (%d)", len(removed))
        self._notify(NoteChange(ChangeKind.CLEARED, removed))
        if error:
            raise error

    def reload(self) -> None:
        """Replace the in-memory collection with what the backend holds."""
        with self._lock:
            self._notes = {note.id: note for note in self.backend.get_notes()}
            loaded = tuple(self._notes)

        logger.debug("Reloaded %d notes", len(loaded))
        self._notify(NoteChange(ChangeKind.RELOADED, loaded))

    # Subscriptions

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Call `callback` after every change to the collection.

        Returns a function that removes the subscription.
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def watch(self, on_change: Subscriber | None = None) -> "LiveNotes":
        """Get a self-refreshing view of the collection."""
        return LiveNotes(self, on_change)

    # Internals

    def _now(self) -> datetime:
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now

    def _new_id(self) -> str:
        while True:
            note_id = uuid.uuid4().hex
            if note_id not in self._notes and note_id not in self._retired:
                return note_id

    def _write(self, operation: Callable[..., Any], *args: Any, note: Note | None = None) -> PersistenceError | None:
        """Run a backend write, returning the failure instead of raising it."""
        try:
            operation(*args)
        except PersistenceError as e:
            logger.warning("Persisting %s failed", operation.__name__, exc_info=True)
            if e.note is None:
                e.note = note
            return e
        return None

    def _notify(self, change: NoteChange) -> None:
        with self._lock:
            subscribers = list(self._subscribers)

        for callback in subscribers:
            try:
                callback(change)
            except Exception:
                logger.exception("Note subscriber %r failed on %s", callback, change.kind.value)


class LiveNotes(Sequence):
    """
    A read-only list of notes that follows the store.

    Refreshes its snapshot whenever the store changes, then calls the
    optional on_change callback. Call close() (or use as a context
    manager) to stop following.
    """

    def __init__(self, store: NoteStore, on_change: Subscriber | None = None):
        self._store = store
        self._on_change = on_change
        self._notes = store.list()
        self._unsubscribe: Callable[[], None] | None = store.subscribe(self._refresh)

    def _refresh(self, change: NoteChange) -> None:
        self._notes = self._store.list()
        if self._on_change:
            self._on_change(change)

    def __getitem__(self, index):
        return self._notes[index]

    def __len__(self) -> int:
        return len(self._notes)

    def close(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def __enter__(self) -> "LiveNotes":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def open_store(
    config: dict[str, Any] | None = None,
    clock: Callable[[], datetime] | None = None,
) -> NoteStore:
    """Build a NoteStore from configuration."""
    config = config or load_config()

    backend: NoteBackend
    if config["store"]["backend"] == "memory":
        backend = MemoryDatabase()
    else:
        home = Path(config["snownotes"]["home"]).expanduser()
        backend = Database(home / DB_FILENAME)

    notes_config = config.get("notes", {})
    return NoteStore(
        backend,
        clock=clock,
        default_title=notes_config.get("default_title", DEFAULT_TITLE),
        default_body=notes_config.get("default_body", DEFAULT_BODY),
    )

"""Tests for the SQLite and in-memory backends."""

from datetime import datetime, timedelta, timezone

import pytest

from snownotes.db import Database, MemoryDatabase
from snownotes.errors import PersistenceError
from snownotes.models import Note

T0 = datetime(2024, 5, 19, 9, 0, tzinfo=timezone.utc)


def make_note(note_id="n1", title="Title", body="Body", minutes=0):
    return Note(
        id=note_id,
        title=title,
        body=body,
        created_at=T0,
        modified_at=T0 + timedelta(minutes=minutes),
    )


def test_insert_and_read_back(backend):
    note = make_note()
    backend.insert_note(note)

    assert backend.get_notes() == [note]
    assert backend.get_note("n1") == note
    assert backend.get_note("nope") is None


def test_get_notes_newest_edit_first(backend):
    backend.insert_note(make_note("old", minutes=1))
    backend.insert_note(make_note("new", minutes=5))

    assert [n.id for n in backend.get_notes()] == ["new", "old"]


def test_duplicate_insert_raises_persistence_error(backend):
    backend.insert_note(make_note())

    with pytest.raises(PersistenceError):
        backend.insert_note(make_note(title="again"))


def test_update_keeps_created_at(backend):
    backend.insert_note(make_note())
    changed = make_note(title="New", minutes=3).model_copy(
        update={"created_at": T0 + timedelta(minutes=1)}
    )

    backend.update_note(changed)

    stored = backend.get_note("n1")
    assert stored.title == "New"
    assert stored.created_at == T0
    assert stored.modified_at == T0 + timedelta(minutes=3)


def test_update_inserts_missing_row(backend):
    backend.update_note(make_note("late"))

    assert backend.get_note("late") is not None


def test_delete_notes_counts_rows(backend):
    for note_id in ("a", "b", "c"):
        backend.insert_note(make_note(note_id))

    assert backend.delete_notes(["a", "c", "zzz"]) == 2
    assert [n.id for n in backend.get_notes()] == ["b"]
    assert backend.delete_notes([]) == 0


def test_delete_all_notes(backend):
    for note_id in ("a", "b"):
        backend.insert_note(make_note(note_id))

    assert backend.delete_all_notes() == 2
    assert backend.get_notes() == []


def test_hint_state(backend):
    assert backend.get_hint_state("edit-title") == {"display_count": 0, "invalidated": False}

    backend.record_hint_display("edit-title")
    backend.record_hint_display("edit-title")
    backend.invalidate_hint("edit-body")

    assert backend.get_hint_state("edit-title") == {"display_count": 2, "invalidated": False}
    assert backend.get_hint_state("edit-body") == {"display_count": 0, "invalidated": True}

    backend.reset_hints()
    assert backend.get_hint_state("edit-body")["invalidated"] is False


def test_stats(backend):
    assert backend.get_stats()["total_notes"] == 0

    backend.insert_note(make_note("a", minutes=2))
    backend.insert_note(make_note("b", minutes=7))

    stats = backend.get_stats()
    assert stats["total_notes"] == 2
    assert stats["oldest_created"] == T0.isoformat()
    assert stats["last_modified"] == (T0 + timedelta(minutes=7)).isoformat()


def test_database_creates_parent_dirs(tmp_path):
    path = tmp_path / "deep" / "er" / "notes.db"
    Database(path)

    assert path.exists()


def test_unopenable_database_raises_persistence_error(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")

    with pytest.raises(PersistenceError):
        Database(blocker / "notes.db")


def test_memory_database_is_not_shared():
    first = MemoryDatabase()
    first.insert_note(make_note())

    assert MemoryDatabase().get_notes() == []

"""Tests for the Note model."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from snownotes.models import Note

T0 = datetime(2024, 5, 19, 9, 0, tzinfo=timezone.utc)


def make_note(**overrides):
    fields = {
        "id": "abc123",
        "title": "Title",
        "body": "Body",
        "created_at": T0,
        "modified_at": T0,
    }
    fields.update(overrides)
    return Note(**fields)


def test_modified_before_created_rejected():
    with pytest.raises(ValidationError):
        make_note(modified_at=T0 - timedelta(seconds=1))


def test_notes_are_frozen():
    note = make_note()
    with pytest.raises(ValidationError):
        note.title = "changed"


def test_empty_id_rejected():
    with pytest.raises(ValidationError):
        make_note(id="")


def test_row_conversion_keeps_timezone():
    note = make_note(modified_at=T0 + timedelta(minutes=5))
    row = note.to_row()

    assert row["created_at"] == "2024-05-19T09:00:00+00:00"
    assert Note.from_row(row) == note

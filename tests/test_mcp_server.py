"""Tests for the MCP tool handlers."""

import asyncio
import logging

import pytest

from snownotes.db import MemoryDatabase
from snownotes.store import NoteStore
from snownotes.surfacing import Colors
from snownotes_mcp import server


@pytest.fixture
def store(clock):
    store = NoteStore(MemoryDatabase(), clock=clock)
    server.set_store(store)
    yield store
    server.set_store(None)


def call(name, arguments):
    [content] = asyncio.run(server.call_tool(name, arguments))
    return content.text


def test_tools_are_listed():
    tools = asyncio.run(server.list_tools())

    assert {tool.name for tool in tools} == {
        "snownotes_list",
        "snownotes_get",
        "snownotes_add",
        "snownotes_edit",
        "snownotes_delete",
    }


def test_add_get_edit_delete(store):
    text = call("snownotes_add", {"title": "Hello", "body": "World"})
    note_id = text.removeprefix("Added: ")
    assert store.get(note_id).title == "Hello"

    assert "World" in call("snownotes_get", {"note_id": note_id[:8]})

    assert call("snownotes_edit", {"note_id": note_id, "body": "World!"}).startswith("Updated")
    assert call("snownotes_edit", {"note_id": note_id, "body": "World!"}).startswith("No changes")
    assert store.get(note_id).body == "World!"

    assert call("snownotes_delete", {"note_ids": [note_id]}) == "Deleted 1 note(s)"
    assert len(store) == 0


def test_list(store):
    store.create("First", "")

    assert "First" in call("snownotes_list", {})
    assert "Created" in call("snownotes_list", {"show_created": True})


def test_missing_note(store):
    assert call("snownotes_get", {"note_id": "nope"}) == "Note not found: nope"
    assert call("snownotes_edit", {"note_id": "nope", "title": "x"}) == "Note not found: nope"


def test_delete_reports_missing(store):
    note = store.create()

    text = call("snownotes_delete", {"note_ids": [note.id, "ghost"]})

    assert text.splitlines() == ["Deleted 1 note(s)", "Note not found: ghost"]


def test_argument_errors(store):
    assert call("snownotes_edit", {"note_id": "abc"}).startswith("Error")
    assert call("snownotes_delete", {"note_ids": []}).startswith("Error")
    assert call("snownotes_unknown", {}) == "Unknown tool: snownotes_unknown"


def test_ambiguous_prefix_is_reported(clock):
    db = MemoryDatabase()
    first = NoteStore(db, clock=clock).create("first", "")
    for note_id in ("abc1", "abc2"):
        db.insert_note(first.model_copy(update={"id": note_id}))
    server.set_store(NoteStore(db, clock=clock))

    try:
        assert call("snownotes_get", {"note_id": "abc"}).startswith("Error: Ambiguous")
        assert call("snownotes_get", {"note_id": "abc1"}).startswith("first")
    finally:
        server.set_store(None)


def test_configure_sets_up_logging(write_config, monkeypatch):
    monkeypatch.setattr(Colors, "configured", True)
    write_config('[logging]\nlevel = "DEBUG"\n')

    config = server.configure()

    logger = logging.getLogger("snownotes")
    assert config["logging"]["level"] == "DEBUG"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert Colors.configured is False

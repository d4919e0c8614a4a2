"""Tests for the health report."""

from snownotes.config import get_db_path
from snownotes.db import Database
from snownotes.health import format_health_report, run_health_check
from snownotes.hints import EDIT_TITLE, HintTracker
from snownotes.store import NoteStore


def test_fresh_install():
    checks = run_health_check()

    assert checks["Config"][0] == "✓"
    assert checks["Database"] == ("✓", "Not created yet (no notes)")
    assert checks["Hints"] == ("✓", "All pending")


def test_existing_database(clock):
    db = Database(get_db_path())
    store = NoteStore(db, clock=clock)
    store.create()
    store.create()
    HintTracker(db).invalidate(EDIT_TITLE.id)

    checks = run_health_check()

    assert checks["Database"] == ("✓", "OK (2 notes)")
    assert checks["Hints"] == ("✓", "1 pending")


def test_broken_config(write_config):
    write_config("[[[")

    checks = run_health_check()

    assert checks["Config"][0] == "✗"
    assert checks["Database"][0] == "-"


def test_memory_backend(write_config):
    write_config('[store]\nbackend = "memory"\n')

    assert run_health_check()["Database"][0] == "!"


def test_report_format():
    report = format_health_report({"Config": ("✓", "OK")})

    assert report.splitlines() == ["snownotes Health Check", "-" * 40, "✓ Config: OK"]

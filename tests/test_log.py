"""Tests for logging setup."""

import io
import logging
import sys

from snownotes.log import setup_logging


def test_setup_logging_is_idempotent():
    logger = setup_logging("DEBUG")
    setup_logging("INFO")

    assert logger.name == "snownotes"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1


def test_unknown_level_falls_back_to_warning():
    assert setup_logging("CHATTY").level == logging.WARNING


def test_handler_survives_closed_stderr(monkeypatch):
    first = io.StringIO()
    monkeypatch.setattr(sys, "stderr", first)
    setup_logging("WARNING")
    first.close()

    second = io.StringIO()
    monkeypatch.setattr(sys, "stderr", second)
    logger = setup_logging("WARNING")
    logger.getChild("store").warning("could not save")

    assert len(logger.handlers) == 1
    assert "could not save" in second.getvalue()

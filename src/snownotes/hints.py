"""
Onboarding hints for snownotes.

Short tips shown next to the note editor until the user has seen them
often enough or has performed the action they describe.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Hint:
    """A single onboarding tip."""

    id: str
    title: str
    message: str
    max_display_count: int | None = None  # None = until invalidated


EDIT_TITLE = Hint(
    id="edit-title",
    title="Create a Title",
    message="Tap on the title of your note to change it.",
    max_display_count=1,
)

EDIT_BODY = Hint(
    id="edit-body",
    title="Write a Note",
    message="Tap inside the text box to edit your note.",
)

HINTS = {hint.id: hint for hint in (EDIT_TITLE, EDIT_BODY)}


class HintTracker:
    """
    Decides which hints to show and remembers what was shown.

    State lives in the same backend as the notes (Database or
    MemoryDatabase), so it survives restarts with the sqlite backend.
    """

    def __init__(self, db, enabled: bool = True):
        self.db = db
        self.enabled = enabled

    def _hint(self, hint_id: str) -> Hint:
        if hint_id not in HINTS:
            raise KeyError(f"Unknown hint: {hint_id}")
        return HINTS[hint_id]

    def should_show(self, hint_id: str) -> bool:
        """Check whether a hint is still due."""
        hint = self._hint(hint_id)
        if not self.enabled:
            return False

        state = self.db.get_hint_state(hint_id)
        if state["invalidated"]:
            return False
        if hint.max_display_count is not None:
            return state["display_count"] < hint.max_display_count
        return True

    def eligible(self, hint_ids: Iterable[str] | None = None) -> list[Hint]:
        """Hints (all known, or the given ones) that should be shown."""
        ids = list(hint_ids) if hint_ids is not None else list(HINTS)
        return [HINTS[hid] for hid in ids if self.should_show(hid)]

    def mark_shown(self, hint_id: str) -> None:
        """Record one display of a hint."""
        self._hint(hint_id)
        self.db.record_hint_display(hint_id)

    def invalidate(self, hint_id: str) -> None:
        """The user did what the hint suggests; stop showing it."""
        self._hint(hint_id)
        self.db.invalidate_hint(hint_id)
        logger.debug("Hint %s invalidated", hint_id)

    def reset(self) -> None:
        """Forget all hint state so every hint shows again."""
        self.db.reset_hints()
        logger.debug("Hint state reset")

    def status(self) -> dict[str, dict]:
        """Per-hint state for display."""
        return {hid: self.db.get_hint_state(hid) for hid in HINTS}


def format_hint(hint: Hint) -> str:
    """Render a hint as a one-line tip."""
    return f"Tip: {hint.title}. {hint.message}"

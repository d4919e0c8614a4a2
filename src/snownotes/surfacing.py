"""
Surfacing module for snownotes.

Turns notes into terminal text: the note list and the single-note view.
Display preferences are passed in explicitly.
"""

import os
from datetime import datetime
from typing import Any, Iterable

from snownotes.models import Note

SHORT_ID_LENGTH = 8
TITLE_WIDTH = 48

EMPTY_LIST_PROMPT = "No notes yet. Run `snownotes add` to create a new note."


# ANSI color codes
class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"

    BRIGHT_BLACK = "\033[90m"  # Gray
    BRIGHT_CYAN = "\033[96m"

    # Set from the display.color config value
    configured = True

    @classmethod
    def enabled(cls) -> bool:
        """Check if colors should be enabled."""
        if os.environ.get("NO_COLOR"):
            return False
        return cls.configured


def c(text: str, *codes: str) -> str:
    """Apply color codes to text if colors are enabled."""
    if not Colors.enabled():
        return text
    return "".join(codes) + text + Colors.RESET


def format_id(note_id: str) -> str:
    """Shorten a note ID for display. Any unique prefix is accepted back."""
    return note_id[:SHORT_ID_LENGTH]


def format_timestamp(ts: datetime) -> str:
    """Render a UTC timestamp in local time."""
    return ts.astimezone().strftime("%Y-%m-%d %H:%M")


def _one_line(text: str, width: int) -> str:
    line = " ".join(text.split())
    if len(line) > width:
        return line[: width - 1] + "…"
    return line


def format_note_list(notes: Iterable[Note], show_created: bool = False) -> str:
    """
    Format the note list.

    `show_created` adds the creation date under the modification date.
    """
    notes = list(notes)
    if not notes:
        return c(EMPTY_LIST_PROMPT, Colors.DIM)

    lines = [c("━━━ NOTES ━━━", Colors.BOLD, Colors.BLUE), ""]

    for note in notes:
        id_str = c(format_id(note.id), Colors.DIM)
        title = _one_line(note.title, TITLE_WIDTH) or c("(untitled)", Colors.DIM)
        lines.append(f"{id_str}  {c(title, Colors.BOLD)}")
        lines.append(c(f"          Last modified {format_timestamp(note.modified_at)}", Colors.BRIGHT_BLACK))
        if show_created:
            lines.append(c(f"          Created {format_timestamp(note.created_at)}", Colors.BRIGHT_BLACK))

    return "\n".join(lines)


def format_note(note: Note) -> str:
    """Format a single note for reading."""
    lines = [
        c(note.title or "(untitled)", Colors.BOLD),
        c(f"Created at {format_timestamp(note.created_at)}", Colors.BRIGHT_BLACK),
        c(f"Last modified at {format_timestamp(note.modified_at)}", Colors.BRIGHT_BLACK),
        c(f"id: {note.id}", Colors.DIM),
        "",
        note.body,
    ]
    return "\n".join(lines)


def format_stats(stats: dict[str, Any]) -> str:
    """Format database statistics."""
    lines = [
        "snownotes Statistics",
        "-" * 30,
        f"Total notes: {stats['total_notes']}",
    ]
    if stats.get("oldest_created"):
        lines.append(f"Oldest note: {format_timestamp(datetime.fromisoformat(stats['oldest_created']))}")
    if stats.get("last_modified"):
        lines.append(f"Last edit:   {format_timestamp(datetime.fromisoformat(stats['last_modified']))}")
    return "\n".join(lines)

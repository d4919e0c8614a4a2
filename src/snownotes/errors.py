"""
Error types for snownotes.

The store raises these; presentation code decides how to surface them.
"""

from typing import Iterable


class NoteStoreError(Exception):
    """Base class for note store failures."""


class NotFoundError(NoteStoreError, KeyError):
    """One or more note IDs do not match any stored note."""

    def __init__(self, ids: str | Iterable[str]):
        if isinstance(ids, str):
            ids = (ids,)
        self.ids = tuple(ids)
        super().__init__(", ".join(self.ids))

    def __str__(self) -> str:
        if len(self.ids) == 1:
            return f"Note not found: {self.ids[0]}"
        return f"Notes not found: {', '.join(self.ids)}"


class PersistenceError(NoteStoreError):
    """
    Durable storage rejected a read or write.

    The underlying failure is chained as __cause__. When the failure
    happened while saving a specific note, it is available as `note`.
    """

    def __init__(self, message: str, note=None):
        super().__init__(message)
        self.note = note


class AmbiguousIdError(NoteStoreError, ValueError):
    """An ID prefix matches more than one note."""

    def __init__(self, prefix: str, matches: int):
        super().__init__(f"Ambiguous note id {prefix!r} ({matches} matches)")
        self.prefix = prefix
        self.matches = matches

"""
Data model for snownotes.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Note(BaseModel):
    """
    A single note.

    Notes are immutable values. The store replaces a note wholesale on
    update, so content and modified_at always change together.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, description="Opaque unique identifier")
    title: str = Field(description="Note title")
    body: str = Field(description="Note text")
    created_at: datetime = Field(description="Creation time (UTC)")
    modified_at: datetime = Field(description="Last content change (UTC)")

    @model_validator(mode="after")
    def _check_timestamps(self) -> "Note":
        if self.modified_at < self.created_at:
            raise ValueError("modified_at must not precede created_at")
        return self

    def to_row(self) -> dict[str, str]:
        """Serialize for storage (timestamps as ISO 8601)."""
        return {
            "id": self.id,
            "title": self.title,
            "body": self.body,
            "created_at": self.created_at.isoformat(),
            "modified_at": self.modified_at.isoformat(),
        }

    @classmethod
    def from_row(cls, row) -> "Note":
        """Build a Note from a database row or dict."""
        return cls(
            id=row["id"],
            title=row["title"],
            body=row["body"],
            created_at=datetime.fromisoformat(row["created_at"]),
            modified_at=datetime.fromisoformat(row["modified_at"]),
        )

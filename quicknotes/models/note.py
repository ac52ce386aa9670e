"""
Note model and enrichment result.

A note is a short free-text entry. Summary and tags are derived metadata,
absent until the note has been enriched (or patched by hand).
"""

import json
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from quicknotes.utils.exceptions import ValidationError


def encode_tags(tags: list[str] | None) -> str | None:
    """
    Serialize tags for a relational text column.

    Args:
        tags: Ordered tags or None

    Returns:
        JSON list text, or None when tags are absent
    """
    if tags is None:
        return None
    return json.dumps(list(tags), ensure_ascii=False)


def decode_tags(raw: Any) -> list[str] | None:
    """
    Deserialize a stored tags value.

    Accepts the JSON text written by encode_tags, or an already-decoded list
    (some drivers decode JSON columns themselves).
    """
    if raw is None or raw == "":
        return None
    if isinstance(raw, list):
        return [str(tag) for tag in raw]
    value = json.loads(raw)
    if value is None:
        return None
    return [str(tag) for tag in value]


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


class Note(BaseModel):
    """
    Persisted user-authored text plus derived metadata.

    Invariants kept by every repository:
    - id is unique within a backend and never reused
    - created_at never changes after creation
    - updated_at never decreases and is refreshed on every successful patch
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Unique note ID (note_xxx)")
    text: str = Field(..., description="Original note content")
    summary: str | None = Field(default=None, description="Generated or edited summary")
    tags: list[str] | None = Field(default=None, description="Ordered keyword tags")
    created_at: datetime = Field(..., alias="createdAt", description="Creation timestamp")
    updated_at: datetime = Field(..., alias="updatedAt", description="Last update timestamp")

    def matches(self, query: str | None = None, tag: str | None = None) -> bool:
        """
        Check the note against search filters.

        Args:
            query: Case-insensitive substring of text, summary or any tag
            tag: Case-insensitive exact match against any tag

        Returns:
            True if the note passes both filters (blank filters are ignored)
        """
        if not _is_blank(query):
            needle = query.lower()
            in_text = needle in self.text.lower()
            in_summary = self.summary is not None and needle in self.summary.lower()
            in_tags = any(needle in t.lower() for t in self.tags or [])
            if not (in_text or in_summary or in_tags):
                return False

        if not _is_blank(tag):
            wanted = tag.lower()
            if not any(t.lower() == wanted for t in self.tags or []):
                return False

        return True

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize for external callers (camelCase, absent fields omitted).

        Returns:
            JSON-compatible dictionary
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class NotePatch(BaseModel):
    """
    Partial update for a note.

    Only fields that were explicitly set are applied; an explicit None clears
    summary or tags.
    """

    text: str | None = None
    summary: str | None = None
    tags: list[str] | None = None

    def changes(self) -> dict[str, Any]:
        """
        Get the fields to apply.

        Returns:
            Explicitly set fields only

        Raises:
            ValidationError: If text is present but empty
        """
        changes = self.model_dump(exclude_unset=True)
        if "text" in changes and _is_blank(changes["text"]):
            raise ValidationError("Note text cannot be empty", context={"field": "text"})
        return changes


class EnrichResult(BaseModel):
    """Summary and tags produced by an enrichment provider."""

    summary: str
    tags: list[str] = Field(default_factory=list)

    def as_patch(self) -> NotePatch:
        """Convert into a patch that writes summary and tags back to a note."""
        return NotePatch(summary=self.summary, tags=list(self.tags))

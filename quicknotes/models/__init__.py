"""
Data models for QuickNotes.

Core models:
- Note: persisted note with optional summary and tags
- NotePatch: partial update applied through a repository
- EnrichResult: transient provider output merged into a note
"""

from quicknotes.models.note import EnrichResult, Note, NotePatch, decode_tags, encode_tags

__all__ = [
    "Note",
    "NotePatch",
    "EnrichResult",
    "encode_tags",
    "decode_tags",
]

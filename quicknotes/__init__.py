"""
QuickNotes - short notes with pluggable storage and AI enrichment.

Components:
- Repository contract with memory, SQLite, PostgreSQL and Supabase backends
- Enrichment façade over an ordered, self-probing provider chain
- ServiceContext tying both together for callers
"""

from quicknotes.config import Config
from quicknotes.context import ServiceContext
from quicknotes.models import EnrichResult, Note, NotePatch

__version__ = "1.0.0"

__all__ = [
    "Config",
    "ServiceContext",
    "Note",
    "NotePatch",
    "EnrichResult",
]

"""
Note repository implementations for QuickNotes.

Provides abstract base and concrete implementations for note storage.

Available backends:
- InMemoryNoteRepository: process-local dictionary
- SQLiteNoteRepository: embedded single-file store
- PostgresNoteRepository: networked PostgreSQL
- SupabaseNoteRepository: managed cloud PostgreSQL over PostgREST
"""

from quicknotes.core.repository.base import NoteRepository
from quicknotes.core.repository.memory import InMemoryNoteRepository
from quicknotes.core.repository.postgres import PostgresNoteRepository
from quicknotes.core.repository.sqlite import SQLiteNoteRepository
from quicknotes.core.repository.supabase import SupabaseNoteRepository

__all__ = [
    "NoteRepository",
    "InMemoryNoteRepository",
    "SQLiteNoteRepository",
    "PostgresNoteRepository",
    "SupabaseNoteRepository",
]

"""
SQLite note store implementation.

Embedded single-file store using aiosqlite. Suitable for a long-lived process
with a local writable disk.
"""

import sqlite3
from datetime import datetime
from pathlib import Path

import aiosqlite

from quicknotes.core.repository.base import NoteRepository
from quicknotes.models.note import Note, NotePatch, decode_tags, encode_tags
from quicknotes.utils.clock import MonotonicClock
from quicknotes.utils.exceptions import BackendUnavailable, StoreError
from quicknotes.utils.id_generator import generate_note_id
from quicknotes.utils.logger import get_logger

logger = get_logger(__name__)

COLUMNS = "id, text, summary, tags, created_at, updated_at"


def _py_lower(value: str | None) -> str | None:
    """Unicode-aware lower(); SQLite's builtin only folds ASCII."""
    return value.lower() if isinstance(value, str) else value


def _format_timestamp(value: datetime) -> str:
    # Fixed-width so lexicographic order equals chronological order
    return value.isoformat(timespec="microseconds")


class SQLiteNoteRepository(NoteRepository):
    """
    SQLite-based note repository.

    Features:
    - Single local file, created on first use
    - Tags stored as JSON text, searched with json_each
    - Relies on per-statement atomicity only; patch is update-then-read-back
    """

    name = "sqlite"

    def __init__(self, db_path: str = "./notes.db", clock: MonotonicClock | None = None):
        """
        Initialize SQLite note repository.

        Args:
            db_path: Path to SQLite database file (or ":memory:")
            clock: Optional timestamp source
        """
        super().__init__(clock)
        self.db_path = db_path
        self.connection: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """
        Establish connection to SQLite.

        Raises:
            BackendUnavailable: If the file cannot be opened
        """
        if self.connection is not None:
            return
        try:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self.connection = await aiosqlite.connect(self.db_path)
            self.connection.row_factory = aiosqlite.Row
            await self.connection.create_function("py_lower", 1, _py_lower)
            logger.info(f"Connected to SQLite database: {self.db_path}")
        except (OSError, sqlite3.Error) as e:
            logger.bind(db_path=self.db_path).error("Failed to open SQLite database: {}", e)
            raise BackendUnavailable(
                f"Failed to open SQLite database: {e}", context={"db_path": self.db_path}
            ) from e

    async def initialize(self) -> None:
        """
        Initialize database schema.

        Raises:
            BackendUnavailable: If the schema cannot be created
        """
        await self.connect()
        try:
            await self.connection.execute(
                """
                CREATE TABLE IF NOT EXISTS notes (
                    id TEXT PRIMARY KEY,
                    text TEXT NOT NULL,
                    summary TEXT,
                    tags TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """
            )
            await self.connection.execute(
                "CREATE INDEX IF NOT EXISTS idx_notes_created ON notes(created_at)"
            )
            await self.connection.commit()
        except sqlite3.Error as e:
            logger.error("Failed to initialize SQLite schema: {}", e)
            raise BackendUnavailable(f"Failed to initialize SQLite schema: {e}") from e

    async def create(self, text: str) -> Note:
        self._validate_text(text)
        await self._ensure_initialized()

        now = self.clock.now()
        note = Note(id=generate_note_id(), text=text, created_at=now, updated_at=now)
        await self._execute(
            "INSERT INTO notes (id, text, created_at, updated_at) VALUES (?, ?, ?, ?)",
            (note.id, note.text, _format_timestamp(now), _format_timestamp(now)),
        )
        return note

    async def list_notes(self) -> list[Note]:
        await self._ensure_initialized()
        return await self._fetch_all(
            f"SELECT {COLUMNS} FROM notes ORDER BY created_at DESC, rowid DESC", ()
        )

    async def get_by_id(self, note_id: str) -> Note | None:
        await self._ensure_initialized()

        notes = await self._fetch_all(f"SELECT {COLUMNS} FROM notes WHERE id = ?", (note_id,))
        return notes[0] if notes else None

    async def patch(self, note_id: str, patch: NotePatch) -> Note | None:
        changes = patch.changes()
        await self._ensure_initialized()

        set_parts = []
        values = []
        for field in ("text", "summary", "tags"):
            if field in changes:
                set_parts.append(f"{field} = ?")
                value = changes[field]
                values.append(encode_tags(value) if field == "tags" else value)

        set_parts.append("updated_at = ?")
        values.append(_format_timestamp(self.clock.now()))
        values.append(note_id)

        cursor = await self._execute(
            f"UPDATE notes SET {', '.join(set_parts)} WHERE id = ?", tuple(values)
        )
        if cursor.rowcount == 0:
            return None

        # A concurrent delete between the two statements yields None here
        return await self.get_by_id(note_id)

    async def search(self, query: str | None = None, tag: str | None = None) -> list[Note]:
        await self._ensure_initialized()

        sql = f"SELECT {COLUMNS} FROM notes WHERE 1=1"
        params = []

        if query and query.strip():
            needle = query.lower()
            sql += (
                " AND (instr(py_lower(text), ?) > 0"
                " OR instr(py_lower(COALESCE(summary, '')), ?) > 0"
                " OR EXISTS (SELECT 1 FROM json_each(notes.tags) AS t"
                " WHERE instr(py_lower(t.value), ?) > 0))"
            )
            params.extend([needle, needle, needle])

        if tag and tag.strip():
            sql += (
                " AND EXISTS (SELECT 1 FROM json_each(notes.tags) AS t"
                " WHERE py_lower(t.value) = ?)"
            )
            params.append(tag.lower())

        sql += " ORDER BY created_at DESC, rowid DESC"

        return await self._fetch_all(sql, tuple(params))

    async def delete(self, note_id: str) -> bool:
        await self._ensure_initialized()

        cursor = await self._execute("DELETE FROM notes WHERE id = ?", (note_id,))
        return cursor.rowcount > 0

    async def close(self) -> None:
        """Close the SQLite connection."""
        if self.connection is not None:
            await self.connection.close()
            self.connection = None
            self._initialized = False

    async def _execute(self, sql: str, params: tuple) -> aiosqlite.Cursor:
        try:
            cursor = await self.connection.execute(sql, params)
            await self.connection.commit()
            return cursor
        except sqlite3.Error as e:
            logger.error("SQLite statement failed: {}", e)
            raise StoreError(f"SQLite statement failed: {e}") from e

    async def _fetch_all(self, sql: str, params: tuple) -> list[Note]:
        try:
            cursor = await self.connection.execute(sql, params)
            rows = await cursor.fetchall()
        except sqlite3.Error as e:
            logger.error("SQLite query failed: {}", e)
            raise StoreError(f"SQLite query failed: {e}") from e

        return [self._row_to_note(row) for row in rows]

    def _row_to_note(self, row: aiosqlite.Row) -> Note:
        return Note(
            id=row["id"],
            text=row["text"],
            summary=row["summary"],
            tags=decode_tags(row["tags"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

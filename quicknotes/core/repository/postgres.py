"""
PostgreSQL note store implementation.

Networked relational store using an asyncpg connection pool. The pool is
created lazily on first use and lives for the process lifetime.
"""

import asyncio
from typing import Any

import asyncpg

from quicknotes.core.repository.base import NoteRepository
from quicknotes.models.note import Note, NotePatch, decode_tags, encode_tags
from quicknotes.utils.clock import MonotonicClock
from quicknotes.utils.exceptions import BackendUnavailable, StoreError
from quicknotes.utils.id_generator import generate_note_id
from quicknotes.utils.logger import get_logger

logger = get_logger(__name__)

COLUMNS = "id, text, summary, tags, created_at, updated_at"

# Errors meaning the server could not be reached or the connection dropped
CONNECTION_ERRORS = (OSError, asyncio.TimeoutError, asyncpg.InterfaceError)


class PostgresNoteRepository(NoteRepository):
    """
    PostgreSQL-based note repository.

    Features:
    - Lazy connection pool (asyncpg)
    - Creates the database and table when missing
    - Single-statement UPDATE ... RETURNING for patches
    - Search evaluated in SQL, tags unpacked with jsonb_array_elements_text
    - Equal timestamps ordered by the insertion counter (seq), newest first
    """

    name = "postgres"

    def __init__(
        self,
        host: str = "localhost",
        port: int = 5432,
        user: str = "postgres",
        password: str = "",
        database: str = "notes_db",
        min_pool_size: int = 1,
        max_pool_size: int = 10,
        timeout: float = 10.0,
        clock: MonotonicClock | None = None,
    ):
        """
        Initialize PostgreSQL note repository.

        Args:
            host: Server host
            port: Server port
            user: Username
            password: Password
            database: Database name (created if missing)
            min_pool_size: Minimum pooled connections
            max_pool_size: Maximum pooled connections
            timeout: Connection timeout in seconds
            clock: Optional timestamp source
        """
        super().__init__(clock)
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.min_pool_size = min_pool_size
        self.max_pool_size = max_pool_size
        self.timeout = timeout
        self.pool: asyncpg.Pool | None = None

    def _connect_kwargs(self, database: str) -> dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "database": database,
            "timeout": self.timeout,
        }

    async def connect(self) -> None:
        """
        Create the connection pool, creating the database first if needed.

        Raises:
            BackendUnavailable: If the server cannot be reached
        """
        if self.pool is not None:
            return
        try:
            try:
                self.pool = await self._create_pool()
            except asyncpg.InvalidCatalogNameError:
                await self._create_database()
                self.pool = await self._create_pool()
            logger.info(f"Connected to PostgreSQL at {self.host}:{self.port}/{self.database}")
        except (*CONNECTION_ERRORS, asyncpg.PostgresError) as e:
            logger.bind(host=self.host, database=self.database).error(
                "Failed to connect to PostgreSQL: {}", e
            )
            raise BackendUnavailable(
                f"Failed to connect to PostgreSQL: {e}",
                context={"host": self.host, "database": self.database},
            ) from e

    async def _create_pool(self) -> asyncpg.Pool:
        return await asyncpg.create_pool(
            min_size=self.min_pool_size,
            max_size=self.max_pool_size,
            **self._connect_kwargs(self.database),
        )

    async def _create_database(self) -> None:
        logger.info(f"Database '{self.database}' does not exist, creating it")
        connection = await asyncpg.connect(**self._connect_kwargs("postgres"))
        try:
            quoted = '"' + self.database.replace('"', '""') + '"'
            await connection.execute(f"CREATE DATABASE {quoted}")
        finally:
            await connection.close()

    async def initialize(self) -> None:
        """
        Create the notes table if it does not exist.

        Raises:
            BackendUnavailable: If connection or schema creation fails
        """
        await self.connect()
        try:
            await self.pool.execute(
                """
                CREATE TABLE IF NOT EXISTS notes (
                    id TEXT PRIMARY KEY,
                    text TEXT NOT NULL,
                    summary TEXT,
                    tags TEXT,
                    created_at TIMESTAMPTZ NOT NULL,
                    updated_at TIMESTAMPTZ NOT NULL,
                    seq BIGSERIAL
                )
            """
            )
            # Tables created before the insertion counter existed
            await self.pool.execute("ALTER TABLE notes ADD COLUMN IF NOT EXISTS seq BIGSERIAL")
            await self.pool.execute(
                "CREATE INDEX IF NOT EXISTS idx_notes_created ON notes(created_at)"
            )
        except (*CONNECTION_ERRORS, asyncpg.PostgresError) as e:
            logger.error("Failed to initialize PostgreSQL schema: {}", e)
            raise BackendUnavailable(f"Failed to initialize PostgreSQL schema: {e}") from e

    async def create(self, text: str) -> Note:
        self._validate_text(text)
        await self._ensure_initialized()

        now = self.clock.now()
        note = Note(id=generate_note_id(), text=text, created_at=now, updated_at=now)
        await self._run(
            "execute",
            "INSERT INTO notes (id, text, created_at, updated_at) VALUES ($1, $2, $3, $4)",
            note.id,
            note.text,
            now,
            now,
        )
        return note

    async def list_notes(self) -> list[Note]:
        await self._ensure_initialized()

        rows = await self._run(
            "fetch", f"SELECT {COLUMNS} FROM notes ORDER BY created_at DESC, seq DESC"
        )
        return [self._row_to_note(row) for row in rows]

    async def get_by_id(self, note_id: str) -> Note | None:
        await self._ensure_initialized()

        row = await self._run("fetchrow", f"SELECT {COLUMNS} FROM notes WHERE id = $1", note_id)
        return self._row_to_note(row) if row else None

    async def patch(self, note_id: str, patch: NotePatch) -> Note | None:
        changes = patch.changes()
        await self._ensure_initialized()

        set_parts = []
        values: list[Any] = []
        for field in ("text", "summary", "tags"):
            if field in changes:
                value = changes[field]
                values.append(encode_tags(value) if field == "tags" else value)
                set_parts.append(f"{field} = ${len(values)}")

        values.append(self.clock.now())
        set_parts.append(f"updated_at = ${len(values)}")
        values.append(note_id)

        row = await self._run(
            "fetchrow",
            f"UPDATE notes SET {', '.join(set_parts)} WHERE id = ${len(values)} "
            f"RETURNING {COLUMNS}",
            *values,
        )
        return self._row_to_note(row) if row else None

    async def search(self, query: str | None = None, tag: str | None = None) -> list[Note]:
        await self._ensure_initialized()

        sql = f"SELECT {COLUMNS} FROM notes WHERE TRUE"
        params: list[Any] = []

        if query and query.strip():
            params.append(query.lower())
            n = len(params)
            sql += (
                f" AND (strpos(lower(text), ${n}) > 0"
                f" OR strpos(lower(COALESCE(summary, '')), ${n}) > 0"
                f" OR EXISTS (SELECT 1 FROM jsonb_array_elements_text(COALESCE(tags, '[]')::jsonb) AS t(value)"
                f" WHERE strpos(lower(t.value), ${n}) > 0))"
            )

        if tag and tag.strip():
            params.append(tag.lower())
            sql += (
                " AND EXISTS (SELECT 1 FROM jsonb_array_elements_text(COALESCE(tags, '[]')::jsonb) AS t(value)"
                f" WHERE lower(t.value) = ${len(params)})"
            )

        sql += " ORDER BY created_at DESC, seq DESC"

        rows = await self._run("fetch", sql, *params)
        return [self._row_to_note(row) for row in rows]

    async def delete(self, note_id: str) -> bool:
        await self._ensure_initialized()

        status = await self._run("execute", "DELETE FROM notes WHERE id = $1", note_id)
        # asyncpg returns the command tag, e.g. "DELETE 1"
        return int(status.split()[-1]) > 0

    async def close(self) -> None:
        """Close the connection pool."""
        if self.pool is not None:
            await self.pool.close()
            self.pool = None
            self._initialized = False

    async def _run(self, method: str, sql: str, *args: Any) -> Any:
        try:
            return await getattr(self.pool, method)(sql, *args)
        except CONNECTION_ERRORS as e:
            logger.error("PostgreSQL connection failed: {}", e)
            raise BackendUnavailable(f"PostgreSQL connection failed: {e}") from e
        except asyncpg.PostgresError as e:
            logger.error("PostgreSQL statement failed: {}", e)
            raise StoreError(f"PostgreSQL statement failed: {e}") from e

    def _row_to_note(self, row: Any) -> Note:
        return Note(
            id=row["id"],
            text=row["text"],
            summary=row["summary"],
            tags=decode_tags(row["tags"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

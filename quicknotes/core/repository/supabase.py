"""
Supabase note store implementation.

Managed cloud PostgreSQL reached through its PostgREST HTTP interface with
httpx. The notes table is provisioned by Supabase migrations; this adapter
only verifies it is reachable.
"""

from typing import Any

import httpx

from quicknotes.core.repository.base import NoteRepository
from quicknotes.models.note import Note, NotePatch, decode_tags, encode_tags
from quicknotes.utils.clock import MonotonicClock
from quicknotes.utils.exceptions import BackendUnavailable, StoreError
from quicknotes.utils.id_generator import generate_note_id
from quicknotes.utils.logger import get_logger

logger = get_logger(__name__)

COLUMNS = "id,text,summary,tags,created_at,updated_at"


class SupabaseNoteRepository(NoteRepository):
    """
    Supabase (PostgREST) note repository.

    Search filters are applied client-side with Note.matches so the tag
    semantics are identical to the other backends.

    Listing orders by created_at only, since the table schema belongs to the
    Supabase project. Timestamps come from this instance's MonotonicClock and
    never repeat within one process; notes written by several processes at the
    same instant come back in server order.
    """

    name = "supabase"

    def __init__(
        self,
        url: str | None,
        key: str | None,
        table: str = "notes",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: MonotonicClock | None = None,
    ):
        """
        Initialize Supabase note repository.

        Args:
            url: Supabase project URL
            key: Supabase anon or service key
            table: Notes table name
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
            clock: Optional timestamp source
        """
        super().__init__(clock)
        self.url = url
        self.key = key
        self.table = table
        self.timeout = timeout
        self.transport = transport
        self.client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """
        Create the HTTP client.

        Raises:
            BackendUnavailable: If the project URL or key is missing
        """
        if self.client is not None:
            return
        if not self.url or not self.key:
            raise BackendUnavailable(
                "Missing Supabase environment variables: SUPABASE_URL and SUPABASE_ANON_KEY"
            )
        self.client = httpx.AsyncClient(
            base_url=f"{self.url.rstrip('/')}/rest/v1",
            headers={"apikey": self.key, "Authorization": f"Bearer {self.key}"},
            timeout=self.timeout,
            transport=self.transport,
        )

    async def initialize(self) -> None:
        """
        Verify the notes table is reachable.

        Raises:
            BackendUnavailable: If the project or table cannot be reached
        """
        await self.connect()
        try:
            response = await self.client.get(
                f"/{self.table}", params={"select": "id", "limit": "1"}
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Failed to reach Supabase table '{}': {}", self.table, e)
            raise BackendUnavailable(
                f"Failed to reach Supabase table '{self.table}': {e}",
                context={"url": self.url, "table": self.table},
            ) from e
        logger.info(f"Supabase table '{self.table}' ready")

    async def create(self, text: str) -> Note:
        self._validate_text(text)
        await self._ensure_initialized()

        now = self.clock.now()
        note = Note(id=generate_note_id(), text=text, created_at=now, updated_at=now)
        rows = await self._request(
            "POST",
            json={
                "id": note.id,
                "text": note.text,
                "summary": None,
                "tags": None,
                "created_at": now.isoformat(),
                "updated_at": now.isoformat(),
            },
            returning=True,
        )
        return self._row_to_note(rows[0]) if rows else note

    async def list_notes(self) -> list[Note]:
        await self._ensure_initialized()

        rows = await self._request(
            "GET", params={"select": COLUMNS, "order": "created_at.desc"}
        )
        return [self._row_to_note(row) for row in rows]

    async def get_by_id(self, note_id: str) -> Note | None:
        await self._ensure_initialized()

        rows = await self._request("GET", params={"select": COLUMNS, "id": f"eq.{note_id}"})
        return self._row_to_note(rows[0]) if rows else None

    async def patch(self, note_id: str, patch: NotePatch) -> Note | None:
        changes = patch.changes()
        await self._ensure_initialized()

        body: dict[str, Any] = {}
        for field, value in changes.items():
            body[field] = encode_tags(value) if field == "tags" else value
        body["updated_at"] = self.clock.now().isoformat()

        rows = await self._request(
            "PATCH", params={"id": f"eq.{note_id}"}, json=body, returning=True
        )
        return self._row_to_note(rows[0]) if rows else None

    async def search(self, query: str | None = None, tag: str | None = None) -> list[Note]:
        return [note for note in await self.list_notes() if note.matches(query, tag)]

    async def delete(self, note_id: str) -> bool:
        await self._ensure_initialized()

        rows = await self._request("DELETE", params={"id": f"eq.{note_id}"}, returning=True)
        return len(rows) > 0

    async def close(self) -> None:
        """Close the HTTP client."""
        if self.client is not None:
            await self.client.aclose()
            self.client = None
            self._initialized = False

    async def _request(
        self,
        method: str,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        returning: bool = False,
    ) -> list[dict[str, Any]]:
        headers = {"Prefer": "return=representation"} if returning else None
        try:
            response = await self.client.request(
                method, f"/{self.table}", params=params, json=json, headers=headers
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.bind(status=e.response.status_code, body=e.response.text[:200]).error(
                "Supabase {} failed: {}", method, e.response.status_code
            )
            raise StoreError(
                f"Supabase {method} failed with status {e.response.status_code}",
                context={"status": e.response.status_code},
            ) from e
        except httpx.TransportError as e:
            logger.error("Supabase unreachable: {}", e)
            raise BackendUnavailable(f"Supabase unreachable: {e}") from e

        if not response.content:
            return []
        return response.json()

    def _row_to_note(self, row: dict[str, Any]) -> Note:
        return Note(
            id=row["id"],
            text=row["text"],
            summary=row.get("summary"),
            tags=decode_tags(row.get("tags")),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

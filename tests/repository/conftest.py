"""
Fixtures for repository tests.

The contract suite runs against every backend that needs no external
service: memory, SQLite (temporary file) and Supabase (an in-process fake
PostgREST served through httpx.MockTransport).
"""

import json
from collections.abc import AsyncGenerator
from datetime import datetime

import httpx
import pytest

from quicknotes.core.repository import (
    InMemoryNoteRepository,
    NoteRepository,
    SQLiteNoteRepository,
    SupabaseNoteRepository,
)


class FakePostgREST:
    """
    Minimal PostgREST emulation for one table.

    Supports eq filters on id, order=created_at.desc, limit, and
    Prefer: return=representation.
    """

    def __init__(self, table: str = "notes"):
        self.table = table
        self.rows: list[dict] = []
        self.requests: list[httpx.Request] = []
        self.fail_with: int | None = None

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"message": "injected failure"})
        if request.url.path != f"/rest/v1/{self.table}":
            return httpx.Response(404, json={"message": "relation does not exist"})

        params = request.url.params
        selected = self._filter(params)

        if request.method == "GET":
            if params.get("order") == "created_at.desc":
                selected.sort(key=lambda r: datetime.fromisoformat(r["created_at"]), reverse=True)
            if "limit" in params:
                selected = selected[: int(params["limit"])]
            return httpx.Response(200, json=selected)

        if request.method == "POST":
            row = json.loads(request.content)
            self.rows.append(row)
            return self._respond(request, [row], status=201)

        if request.method == "PATCH":
            body = json.loads(request.content)
            for row in selected:
                row.update(body)
            return self._respond(request, selected)

        if request.method == "DELETE":
            self.rows = [row for row in self.rows if row not in selected]
            return self._respond(request, selected)

        return httpx.Response(405)

    def _filter(self, params: httpx.QueryParams) -> list[dict]:
        rows = list(self.rows)
        id_filter = params.get("id")
        if id_filter is not None:
            wanted = id_filter.removeprefix("eq.")
            rows = [row for row in rows if row["id"] == wanted]
        return rows

    @staticmethod
    def _respond(request: httpx.Request, rows: list[dict], status: int = 200) -> httpx.Response:
        if request.headers.get("Prefer") == "return=representation":
            return httpx.Response(status, json=rows)
        return httpx.Response(204 if status == 200 else status)


@pytest.fixture
def postgrest() -> FakePostgREST:
    """Fresh fake PostgREST table."""
    return FakePostgREST()


@pytest.fixture
async def supabase_repo(postgrest) -> AsyncGenerator[SupabaseNoteRepository, None]:
    """Supabase repository wired to the fake PostgREST."""
    repository = SupabaseNoteRepository(
        url="https://project.supabase.co",
        key="anon-key",
        transport=postgrest.transport,
    )
    yield repository
    await repository.close()


@pytest.fixture
async def sqlite_repo(tmp_path) -> AsyncGenerator[SQLiteNoteRepository, None]:
    """SQLite repository on a temporary file."""
    repository = SQLiteNoteRepository(db_path=str(tmp_path / "data" / "notes.db"))
    yield repository
    await repository.close()


@pytest.fixture(params=["memory", "sqlite", "supabase"])
async def repository(request, tmp_path, postgrest) -> AsyncGenerator[NoteRepository, None]:
    """Each locally runnable backend in turn."""
    if request.param == "memory":
        repo: NoteRepository = InMemoryNoteRepository()
    elif request.param == "sqlite":
        repo = SQLiteNoteRepository(db_path=str(tmp_path / "notes.db"))
    else:
        repo = SupabaseNoteRepository(
            url="https://project.supabase.co",
            key="anon-key",
            transport=postgrest.transport,
        )
    yield repo
    await repo.close()

"""
In-memory repository tests beyond the shared contract.
"""

from datetime import datetime, timezone

import pytest

from quicknotes.core.repository import InMemoryNoteRepository
from quicknotes.models import NotePatch
from quicknotes.utils.clock import MonotonicClock


@pytest.mark.unit
@pytest.mark.asyncio
class TestInMemoryNoteRepository:
    """Tests for InMemoryNoteRepository."""

    async def test_returned_notes_are_copies(self):
        """Mutating a returned note does not change stored state."""
        repository = InMemoryNoteRepository()
        note = await repository.create("original")
        await repository.patch(note.id, NotePatch(tags=["a"]))

        fetched = await repository.get_by_id(note.id)
        fetched.text = "mutated"
        fetched.tags.append("b")

        stored = await repository.get_by_id(note.id)
        assert stored.text == "original"
        assert stored.tags == ["a"]

    async def test_equal_timestamps_list_latest_insert_first(self):
        """Ties on created_at are broken by insertion order, newest first."""
        frozen = datetime(2024, 1, 1, tzinfo=timezone.utc)
        clock = MonotonicClock(source=lambda: frozen)
        repository = InMemoryNoteRepository(clock=clock)
        n1 = await repository.create("one")
        n2 = await repository.create("two")
        # Force a genuine tie
        repository._notes[n2.id] = repository._notes[n2.id].model_copy(
            update={"created_at": n1.created_at}
        )

        assert [n.id for n in await repository.list_notes()] == [n2.id, n1.id]

    async def test_last_writer_wins(self):
        """Sequential conflicting patches keep the last one."""
        repository = InMemoryNoteRepository()
        note = await repository.create("shared")

        await repository.patch(note.id, NotePatch(summary="first"))
        await repository.patch(note.id, NotePatch(summary="second"))

        assert (await repository.get_by_id(note.id)).summary == "second"

    async def test_instances_do_not_share_state(self):
        """Each repository instance owns its own notes."""
        first = InMemoryNoteRepository()
        second = InMemoryNoteRepository()
        await first.create("only in first")

        assert await second.list_notes() == []

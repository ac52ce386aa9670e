"""
In-memory note store.

Used for tests and for restricted environments without a durable disk.
Data lives for the process lifetime only.
"""

from quicknotes.core.repository.base import NoteRepository
from quicknotes.models.note import Note, NotePatch
from quicknotes.utils.clock import MonotonicClock
from quicknotes.utils.id_generator import generate_note_id


class InMemoryNoteRepository(NoteRepository):
    """
    Dictionary-backed repository.

    Operations are not guarded by a per-id lock: concurrent patches to the
    same note interleave and the last one to complete wins.
    """

    name = "memory"

    def __init__(self, clock: MonotonicClock | None = None):
        super().__init__(clock)
        # dict preserves insertion order, used for tie-breaking in list_notes()
        self._notes: dict[str, Note] = {}

    async def initialize(self) -> None:
        """Nothing to create."""
        pass

    async def create(self, text: str) -> Note:
        self._validate_text(text)
        await self._ensure_initialized()

        now = self.clock.now()
        note = Note(id=generate_note_id(), text=text, created_at=now, updated_at=now)
        self._notes[note.id] = note
        return note.model_copy(deep=True)

    async def list_notes(self) -> list[Note]:
        await self._ensure_initialized()

        newest_inserted_first = list(reversed(self._notes.values()))
        ordered = sorted(newest_inserted_first, key=lambda n: n.created_at, reverse=True)
        return [note.model_copy(deep=True) for note in ordered]

    async def get_by_id(self, note_id: str) -> Note | None:
        await self._ensure_initialized()

        note = self._notes.get(note_id)
        return note.model_copy(deep=True) if note else None

    async def patch(self, note_id: str, patch: NotePatch) -> Note | None:
        changes = patch.changes()
        await self._ensure_initialized()

        current = self._notes.get(note_id)
        if current is None:
            return None

        updated = current.model_copy(update={**changes, "updated_at": self.clock.now()}, deep=True)
        self._notes[note_id] = updated
        return updated.model_copy(deep=True)

    async def search(self, query: str | None = None, tag: str | None = None) -> list[Note]:
        return [note for note in await self.list_notes() if note.matches(query, tag)]

    async def delete(self, note_id: str) -> bool:
        await self._ensure_initialized()

        return self._notes.pop(note_id, None) is not None

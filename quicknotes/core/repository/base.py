"""
Base interface for note storage.

Every backend implements the same contract; callers obtain one repository at
start-up and never see backend-specific details.
"""

import asyncio
from abc import ABC, abstractmethod

from quicknotes.models.note import Note, NotePatch
from quicknotes.utils.clock import MonotonicClock
from quicknotes.utils.exceptions import ValidationError


class NoteRepository(ABC):
    """
    Abstract base class for note storage implementations.

    Schema/table setup is lazy: the first operation runs initialize() once,
    guarded by a lock and an explicit initialized flag.
    """

    name: str = "base"

    def __init__(self, clock: MonotonicClock | None = None):
        self.clock = clock or MonotonicClock()
        self._initialized = False
        self._init_lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        """Whether the ensure-exists step has completed."""
        return self._initialized

    async def _ensure_initialized(self) -> None:
        if self._initialized:
            return
        async with self._init_lock:
            if not self._initialized:
                await self.initialize()
                self._initialized = True

    @staticmethod
    def _validate_text(text: str) -> str:
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Note text cannot be empty", context={"field": "text"})
        return text

    @abstractmethod
    async def initialize(self) -> None:
        """
        Create connections and tables if they do not exist.

        Raises:
            BackendUnavailable: If the backend cannot be reached or initialized
        """
        pass

    @abstractmethod
    async def create(self, text: str) -> Note:
        """
        Create and persist a new note.

        Args:
            text: Note content (required, non-empty)

        Returns:
            The created note

        Raises:
            ValidationError: If text is empty
        """
        pass

    @abstractmethod
    async def list_notes(self) -> list[Note]:
        """
        List all notes, newest first.

        Returns:
            Notes ordered by created_at descending (latest insertion first on ties)
        """
        pass

    @abstractmethod
    async def get_by_id(self, note_id: str) -> Note | None:
        """
        Retrieve a note by ID.

        Args:
            note_id: Note identifier

        Returns:
            Note or None if not found
        """
        pass

    @abstractmethod
    async def patch(self, note_id: str, patch: NotePatch) -> Note | None:
        """
        Apply a partial update.

        Only fields set on the patch are written; updated_at is refreshed even
        when the patch is empty.

        Args:
            note_id: Note identifier
            patch: Fields to change

        Returns:
            Updated note or None if not found
        """
        pass

    @abstractmethod
    async def search(self, query: str | None = None, tag: str | None = None) -> list[Note]:
        """
        Search notes.

        Args:
            query: Case-insensitive substring of text, summary or any tag
            tag: Case-insensitive exact tag match

        Returns:
            Matching notes in list_notes() order
        """
        pass

    @abstractmethod
    async def delete(self, note_id: str) -> bool:
        """
        Permanently delete a note.

        Args:
            note_id: Note identifier

        Returns:
            True if a note was removed, False if the id was unknown
        """
        pass

    async def close(self) -> None:
        """
        Release connections.
        Optional to override if the backend holds handles.
        """
        # Default implementation does nothing

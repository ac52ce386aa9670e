"""
Abstract base class for enrichment providers.
Turns note text into a summary and keyword tags.
"""

from abc import ABC, abstractmethod

from quicknotes.models.note import EnrichResult


class EnrichmentProvider(ABC):
    """
    Abstract base for enrichment providers.

    Responsibilities:
    - Report availability from locally visible prerequisites only
    - Produce an EnrichResult for a note's text
    """

    name: str = "base"

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check whether the provider's prerequisites are configured.

        Must be cheap and synchronous, and must never perform network I/O.

        Returns:
            True if the provider can be selected
        """
        pass

    @abstractmethod
    async def enrich(self, text: str) -> EnrichResult:
        """
        Generate a summary and tags for text.

        Args:
            text: Note text

        Returns:
            EnrichResult

        Raises:
            ProviderError: If the provider fails (transport, status, parsing)
        """
        pass

    async def close(self) -> None:
        """
        Close any open connections.
        Optional to override if provider needs cleanup.
        """
        # Default implementation does nothing

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"

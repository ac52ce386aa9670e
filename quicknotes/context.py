"""
Service context - the single entry point for callers.

Built once at process start from configuration and passed to every consumer
(HTTP routes, tool adapters). Holds the active repository and the enricher;
nothing else in the package keeps process-wide state.
"""

from collections.abc import Mapping

from quicknotes.config import Config
from quicknotes.core.factory import ProviderFactory, RepositoryFactory
from quicknotes.core.repository.base import NoteRepository
from quicknotes.models.note import EnrichResult, Note
from quicknotes.services.enrichment import Enricher
from quicknotes.utils.exceptions import NotFoundError
from quicknotes.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


class ServiceContext:
    """
    Repository + enricher pair shared by all callers.

    Usage:
        async with ServiceContext.from_config(Config.from_env()) as ctx:
            note = await ctx.repository.create("Buy milk")
            note = await ctx.enrich_note(note.id)
    """

    def __init__(self, config: Config, repository: NoteRepository, enricher: Enricher):
        self.config = config
        self.repository = repository
        self.enricher = enricher

    @classmethod
    def from_config(
        cls, config: Config, environ: Mapping[str, str] | None = None
    ) -> "ServiceContext":
        """
        Configure logging, then build the configured backend and provider chain.

        Args:
            config: Main configuration
            environ: Environment used for deployment detection (default: os.environ)

        Returns:
            ServiceContext
        """
        setup_logging(**config.logging.model_dump())

        repository = RepositoryFactory.create(config, environ)
        enricher = Enricher(
            ProviderFactory.create_all(config), preference=config.providers.preferred
        )

        available = [p["name"] for p in enricher.describe() if p["available"]]
        logger.info(f"Enrichment providers available: {', '.join(available)}")
        return cls(config=config, repository=repository, enricher=enricher)

    async def enrich(self, text: str) -> EnrichResult:
        """Enrich raw text with the active provider chain."""
        return await self.enricher.enrich(text)

    async def enrich_note(self, note_id: str) -> Note:
        """
        Enrich a stored note and write summary and tags back.

        Concurrent enrichment of the same note is not serialized; the patch
        that completes last wins.

        Args:
            note_id: Note identifier

        Returns:
            Updated note

        Raises:
            NotFoundError: If the note does not exist (or was deleted meanwhile)
        """
        note = await self.repository.get_by_id(note_id)
        if note is None:
            raise NotFoundError(f"Note '{note_id}' was not found", context={"note_id": note_id})

        result = await self.enricher.enrich(note.text)

        updated = await self.repository.patch(note_id, result.as_patch())
        if updated is None:
            raise NotFoundError(
                f"Note '{note_id}' was deleted during enrichment", context={"note_id": note_id}
            )
        return updated

    async def close(self) -> None:
        """Release repository connections and provider clients."""
        await self.repository.close()
        await self.enricher.close()

    async def __aenter__(self) -> "ServiceContext":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

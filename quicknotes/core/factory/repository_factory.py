"""
Factory for creating the note repository.
"""

import os
from collections.abc import Mapping

from quicknotes.config import Config
from quicknotes.core.repository.base import NoteRepository
from quicknotes.core.repository.memory import InMemoryNoteRepository
from quicknotes.core.repository.postgres import PostgresNoteRepository
from quicknotes.core.repository.sqlite import SQLiteNoteRepository
from quicknotes.core.repository.supabase import SupabaseNoteRepository
from quicknotes.utils.exceptions import ConfigurationError
from quicknotes.utils.logger import get_logger

logger = get_logger(__name__)

# Environment variables set by serverless/container platforms without a durable disk
RESTRICTED_ENV_MARKERS = (
    "VERCEL",
    "AWS_LAMBDA_FUNCTION_NAME",
    "NETLIFY",
    "FUNCTIONS_WORKER_RUNTIME",
    "K_SERVICE",
)

FILE_BACKENDS = {"sqlite"}


def detect_restricted_environment(
    config: Config, environ: Mapping[str, str] | None = None
) -> bool:
    """
    Detect an execution environment with no durable writable filesystem.

    Args:
        config: Main configuration (explicit stateless flag)
        environ: Environment to inspect (default: os.environ)

    Returns:
        True if file-based storage would silently lose data here
    """
    if config.deployment.stateless:
        return True
    environ = os.environ if environ is None else environ
    return any(environ.get(marker) for marker in RESTRICTED_ENV_MARKERS)


class RepositoryFactory:
    """Factory for creating note repositories from configuration."""

    @staticmethod
    def create(config: Config, environ: Mapping[str, str] | None = None) -> NoteRepository:
        """
        Create note repository from configuration.

        File-based preferences are replaced by the in-memory store when a
        restricted environment is detected.

        Args:
            config: Main configuration object
            environ: Environment used for detection (default: os.environ)

        Returns:
            Note repository instance

        Raises:
            ConfigurationError: If backend is not supported
        """
        backend = config.storage.backend.strip().lower()

        if backend in FILE_BACKENDS and detect_restricted_environment(config, environ):
            logger.warning(
                f"{backend} is not supported in a stateless environment, using memory database"
            )
            backend = "memory"

        if backend == "memory":
            repository = InMemoryNoteRepository()
        elif backend == "sqlite":
            repository = SQLiteNoteRepository(db_path=config.storage.sqlite.path)
        elif backend in ("postgres", "postgresql"):
            pg = config.storage.postgres
            repository = PostgresNoteRepository(
                host=pg.host,
                port=pg.port,
                user=pg.user,
                password=pg.password,
                database=pg.database,
                min_pool_size=pg.min_pool_size,
                max_pool_size=pg.max_pool_size,
                timeout=pg.timeout,
            )
        elif backend == "supabase":
            sb = config.storage.supabase
            repository = SupabaseNoteRepository(
                url=sb.url, key=sb.key, table=sb.table, timeout=sb.timeout
            )
        else:
            raise ConfigurationError(
                f"Unsupported storage backend: {config.storage.backend}",
                context={"backend": config.storage.backend},
            )

        logger.info(f"Using {repository.name} note repository")
        return repository

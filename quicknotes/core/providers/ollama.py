"""
Ollama enrichment provider using native ollama-python SDK.
"""

import ollama

from quicknotes.config import is_configured
from quicknotes.core.providers.base import EnrichmentProvider
from quicknotes.core.providers.parsing import build_prompt, repair_response
from quicknotes.models.note import EnrichResult
from quicknotes.utils.exceptions import ProviderError
from quicknotes.utils.logger import get_logger

logger = get_logger(__name__)


class OllamaProvider(EnrichmentProvider):
    """
    Self-hosted Ollama provider.

    Available only when both a base URL and a model are configured.
    """

    name = "Ollama"

    def __init__(
        self,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float = 30.0,
        client: ollama.AsyncClient | None = None,
    ):
        """
        Initialize Ollama provider.

        Args:
            base_url: Ollama server URL
            model: Model name (e.g., "llama3.2:3b")
            timeout: Request timeout in seconds
            client: Optional pre-built client
        """
        self.base_url = base_url
        self.model = model
        self.timeout = timeout
        self._client = client

    @property
    def client(self) -> ollama.AsyncClient:
        if self._client is None:
            self._client = ollama.AsyncClient(host=self.base_url, timeout=self.timeout)
        return self._client

    def is_available(self) -> bool:
        return is_configured(self.base_url) and is_configured(self.model)

    async def enrich(self, text: str) -> EnrichResult:
        try:
            response = await self.client.generate(
                model=self.model,
                prompt=build_prompt(text),
                stream=False,
            )
            content = response["response"]
        except Exception as e:
            logger.bind(model=self.model, error_type=type(e).__name__).error("Ollama API error: {}", e)
            raise ProviderError(f"Ollama API error: {e}", context={"provider": self.name}) from e

        return repair_response(content)

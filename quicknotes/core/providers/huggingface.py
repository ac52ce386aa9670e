"""
Hugging Face text-generation provider over plain HTTP (httpx).

Targets either the hosted Inference API (model URL + API key) or a
self-hosted text-generation endpoint (explicit endpoint URL).
"""

from typing import Any

import httpx

from quicknotes.config import is_configured
from quicknotes.core.providers.base import EnrichmentProvider
from quicknotes.core.providers.parsing import build_prompt, repair_response
from quicknotes.models.note import EnrichResult
from quicknotes.utils.exceptions import ProviderError
from quicknotes.utils.logger import get_logger

logger = get_logger(__name__)


class HuggingFaceProvider(EnrichmentProvider):
    """Hugging Face inference provider."""

    name = "Hugging Face"

    def __init__(
        self,
        api_key: str | None = None,
        endpoint_url: str | None = None,
        api_base: str = "https://api-inference.huggingface.co/models",
        model: str = "mistralai/Mistral-7B-Instruct-v0.2",
        max_new_tokens: int = 100,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize Hugging Face provider.

        Args:
            api_key: Inference API token
            endpoint_url: Self-hosted endpoint URL (overrides api_base/model)
            api_base: Hosted Inference API base
            model: Hosted model name
            max_new_tokens: Maximum tokens to generate
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.api_key = api_key
        self.endpoint_url = endpoint_url
        self.api_base = api_base
        self.model = model
        self.max_new_tokens = max_new_tokens
        self.timeout = timeout
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def url(self) -> str:
        if is_configured(self.endpoint_url):
            return self.endpoint_url
        return f"{self.api_base.rstrip('/')}/{self.model}"

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {}
            if is_configured(self.api_key):
                headers["Authorization"] = f"Bearer {self.api_key}"
            self._client = httpx.AsyncClient(
                headers=headers, timeout=self.timeout, transport=self.transport
            )
        return self._client

    def is_available(self) -> bool:
        return is_configured(self.api_key) or is_configured(self.endpoint_url)

    async def enrich(self, text: str) -> EnrichResult:
        try:
            response = await self.client.post(
                self.url,
                json={
                    "inputs": build_prompt(text),
                    "parameters": {
                        "max_new_tokens": self.max_new_tokens,
                        "return_full_text": False,
                    },
                },
            )
            response.raise_for_status()
            generated = self._generated_text(response.json())
        except Exception as e:
            logger.bind(url=self.url, error_type=type(e).__name__).error(
                "Hugging Face API error: {}", e
            )
            raise ProviderError(
                f"Hugging Face API error: {e}", context={"provider": self.name}
            ) from e

        return repair_response(generated)

    @staticmethod
    def _generated_text(data: Any) -> str:
        # Inference API returns a list, TGI endpoints may return a bare object
        if isinstance(data, list):
            data = data[0]
        return data["generated_text"]

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

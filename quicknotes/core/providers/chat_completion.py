"""
Hosted chat-completions providers using the official OpenAI SDK.

Groq exposes an OpenAI-compatible API, so both providers share one client
implementation and differ only in name, base URL and default model.
"""

from openai import AsyncOpenAI

from quicknotes.config import is_configured
from quicknotes.core.providers.base import EnrichmentProvider
from quicknotes.core.providers.parsing import build_prompt, repair_response
from quicknotes.models.note import EnrichResult
from quicknotes.utils.exceptions import ProviderError
from quicknotes.utils.logger import get_logger

logger = get_logger(__name__)


class ChatCompletionProvider(EnrichmentProvider):
    """
    Provider backed by a /chat/completions endpoint.

    Available when an API key is configured. The model's answer goes through
    the response repair helpers (fence stripping, JSON, line heuristics).
    """

    name = "Chat Completion"
    default_model = "gpt-4o-mini"
    default_base_url: str | None = None

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        max_tokens: int = 150,
        timeout: float = 30.0,
        client: AsyncOpenAI | None = None,
    ):
        """
        Initialize chat-completions provider.

        Args:
            api_key: API key
            model: Model name
            base_url: Optional custom base URL
            max_tokens: Maximum tokens to generate
            timeout: Request timeout in seconds
            client: Optional pre-built client
        """
        self.api_key = api_key
        self.model = model or self.default_model
        self.base_url = base_url or self.default_base_url
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.api_key, base_url=self.base_url, timeout=self.timeout
            )
        return self._client

    def is_available(self) -> bool:
        return is_configured(self.api_key)

    async def enrich(self, text: str) -> EnrichResult:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": build_prompt(text)}],
                max_tokens=self.max_tokens,
            )
            content = response.choices[0].message.content
        except Exception as e:
            logger.bind(model=self.model, error_type=type(e).__name__).error(
                "{} API error: {}", self.name, e
            )
            raise ProviderError(f"{self.name} API error: {e}", context={"provider": self.name}) from e

        return repair_response(content)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.close()
            self._client = None


class GroqProvider(ChatCompletionProvider):
    """Groq hosted inference (free tier)."""

    name = "Groq"
    default_model = "llama-3.1-8b-instant"
    default_base_url = "https://api.groq.com/openai/v1"


class OpenAIProvider(ChatCompletionProvider):
    """OpenAI hosted inference."""

    name = "OpenAI"
    default_model = "gpt-4o-mini"

"""
Tests for the hosted chat-completions providers (Groq, OpenAI).
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from loguru import logger
from openai import AsyncOpenAI

from quicknotes.core.providers import GroqProvider, OpenAIProvider
from quicknotes.utils.exceptions import ProviderError


def completion(content):
    """Build a chat completion response with one choice."""
    return MagicMock(choices=[MagicMock(message=MagicMock(content=content))])


@pytest.mark.unit
class TestChatCompletionConfiguration:
    """Defaults and availability."""

    def test_groq_defaults(self):
        """Groq uses its OpenAI-compatible endpoint."""
        provider = GroqProvider(api_key="gsk-test")

        assert provider.name == "Groq"
        assert provider.model == "llama-3.1-8b-instant"
        assert str(provider.client.base_url).startswith("https://api.groq.com/openai/v1")

    def test_openai_defaults(self):
        """OpenAI uses the SDK default endpoint."""
        provider = OpenAIProvider(api_key="sk-test")

        assert provider.name == "OpenAI"
        assert provider.model == "gpt-4o-mini"
        assert provider.base_url is None

    @pytest.mark.parametrize(
        "api_key,expected",
        [("sk-test", True), (None, False), ("", False), ("your_openai_api_key_here", False)],
    )
    def test_is_available(self, api_key, expected):
        """Only a real key makes the provider available."""
        assert OpenAIProvider(api_key=api_key).is_available() is expected


@pytest.mark.unit
@pytest.mark.asyncio
class TestChatCompletionEnrich:
    """Tests for enrich() on hosted providers."""

    @pytest.fixture
    def provider(self):
        return OpenAIProvider(api_key="sk-test", max_tokens=80)

    async def test_json_answer(self, provider):
        """The model's JSON answer is parsed."""
        with patch.object(
            provider.client.chat.completions, "create", new_callable=AsyncMock
        ) as create:
            create.return_value = completion('{"summary": "Budget review", "tags": ["budget"]}')

            result = await provider.enrich("Review the Q3 budget")

        assert result.summary == "Budget review"
        assert result.tags == ["budget"]
        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["max_tokens"] == 80
        assert kwargs["messages"][0]["role"] == "user"
        assert "Review the Q3 budget" in kwargs["messages"][0]["content"]

    async def test_answer_wrapped_in_prose(self, provider):
        """JSON surrounded by chatter is still found."""
        with patch.object(
            provider.client.chat.completions, "create", new_callable=AsyncMock
        ) as create:
            create.return_value = completion(
                'Sure! Here it is:\n{"summary": "S", "tags": ["x"]}\nLet me know.'
            )

            result = await provider.enrich("text")

        assert result.summary == "S"

    async def test_no_content(self, provider):
        """A missing message content is a ProviderError."""
        with patch.object(
            provider.client.chat.completions, "create", new_callable=AsyncMock
        ) as create:
            create.return_value = completion(None)

            with pytest.raises(ProviderError, match="No content"):
                await provider.enrich("text")

    async def test_sdk_error_wrapped(self, provider):
        """SDK failures carry the provider name."""
        with patch.object(
            provider.client.chat.completions, "create", new_callable=AsyncMock
        ) as create:
            create.side_effect = RuntimeError("rate limited")

            with pytest.raises(ProviderError, match="OpenAI API error") as exc_info:
                await provider.enrich("text")

        assert exc_info.value.context == {"provider": "OpenAI"}

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, text="<html>Bad gateway</html>", headers={"content-type": "text/html"}),
            httpx.Response(502, text="upstream error"),
        ],
    )
    async def test_malformed_http_body(self, response):
        """Non-JSON bodies and error statuses from the API are ProviderError."""
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: response))
        client = AsyncOpenAI(
            api_key="gsk-test",
            base_url="https://llm.test/v1",
            http_client=http_client,
            max_retries=0,
        )
        provider = GroqProvider(api_key="gsk-test", client=client)

        try:
            with pytest.raises(ProviderError, match="Groq API error"):
                await provider.enrich("text")
        finally:
            await provider.close()

    async def test_status_error_with_json_body(self):
        """An API error whose text contains a JSON body is still ProviderError."""
        response = httpx.Response(
            401, json={"error": {"message": "Incorrect API key provided", "code": "invalid_api_key"}}
        )
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: response))
        client = AsyncOpenAI(api_key="sk-test", http_client=http_client, max_retries=0)
        provider = OpenAIProvider(api_key="sk-test", client=client)
        records = []
        sink_id = logger.add(records.append, level="ERROR", format="{message}")

        try:
            with pytest.raises(ProviderError, match="OpenAI API error") as exc_info:
                await provider.enrich("text")
        finally:
            logger.remove(sink_id)
            await provider.close()

        assert exc_info.value.context == {"provider": "OpenAI"}
        record = records[0].record
        assert "invalid_api_key" in record["message"]
        assert record["extra"]["model"] == "gpt-4o-mini"
        assert record["extra"]["error_type"] == "AuthenticationError"

    async def test_close_releases_client(self, provider):
        """close() drops the client so it is rebuilt lazily."""
        client = provider.client
        await provider.close()

        assert provider._client is None
        assert provider.client is not client

"""
Shared test fixtures for all test modules.

Every test runs with the QuickNotes-related environment cleared so that
credentials or deployment markers on the host never change which backend or
provider gets selected.
"""

import os

import pytest

from quicknotes.core.providers.base import EnrichmentProvider
from quicknotes.models.note import EnrichResult

MANAGED_ENV_VARS = (
    "AI_PROVIDER",
    "OLLAMA_BASE_URL",
    "OLLAMA_MODEL",
    "GROQ_API_KEY",
    "GROQ_MODEL",
    "GROQ_BASE_URL",
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_BASE_URL",
    "HUGGINGFACE_API_KEY",
    "HUGGINGFACE_ENDPOINT_URL",
    "HUGGINGFACE_MODEL",
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "VERCEL",
    "AWS_LAMBDA_FUNCTION_NAME",
    "NETLIFY",
    "FUNCTIONS_WORKER_RUNTIME",
    "K_SERVICE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Remove host configuration and run from an empty directory (no stray .env)."""
    for key in list(os.environ):
        if key.startswith("NOTES_") and not key.startswith("NOTES_TEST_"):
            monkeypatch.delenv(key, raising=False)
    for key in MANAGED_ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


class StubProvider(EnrichmentProvider):
    """Scriptable provider: returns a fixed result or raises a fixed error."""

    def __init__(
        self,
        name: str,
        available: bool = True,
        result: EnrichResult | None = None,
        error: Exception | None = None,
    ):
        self.name = name
        self.available = available
        self.result = result or EnrichResult(summary=f"{name} summary", tags=[name.lower()])
        self.error = error
        self.calls: list[str] = []
        self.closed = False

    def is_available(self) -> bool:
        return self.available

    async def enrich(self, text: str) -> EnrichResult:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.result

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_provider():
    """Factory for StubProvider instances."""
    return StubProvider

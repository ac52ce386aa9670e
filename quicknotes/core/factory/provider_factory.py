"""
Factory for creating the enrichment provider chain.
"""

from quicknotes.config import Config
from quicknotes.core.providers.base import EnrichmentProvider
from quicknotes.core.providers.chat_completion import GroqProvider, OpenAIProvider
from quicknotes.core.providers.huggingface import HuggingFaceProvider
from quicknotes.core.providers.local_inference import DirectLlamaProvider
from quicknotes.core.providers.ollama import OllamaProvider
from quicknotes.core.providers.rule_based import RuleBasedProvider


class ProviderFactory:
    """Factory for creating enrichment providers from configuration."""

    @staticmethod
    def create_all(config: Config) -> list[EnrichmentProvider]:
        """
        Create every provider in fixed priority order.

        The rule-based provider is always last so a selection always exists.

        Args:
            config: Main configuration object

        Returns:
            Providers, highest priority first
        """
        providers = config.providers
        return [
            DirectLlamaProvider(
                enabled=providers.local.enabled,
                model=providers.local.model,
                max_length=providers.local.max_length,
                min_length=providers.local.min_length,
            ),
            OllamaProvider(
                base_url=providers.ollama.base_url,
                model=providers.ollama.model,
                timeout=providers.ollama.timeout,
            ),
            GroqProvider(
                api_key=providers.groq.api_key,
                model=providers.groq.model,
                base_url=providers.groq.base_url,
                max_tokens=providers.groq.max_tokens,
                timeout=providers.groq.timeout,
            ),
            OpenAIProvider(
                api_key=providers.openai.api_key,
                model=providers.openai.model,
                base_url=providers.openai.base_url,
                max_tokens=providers.openai.max_tokens,
                timeout=providers.openai.timeout,
            ),
            HuggingFaceProvider(
                api_key=providers.huggingface.api_key,
                endpoint_url=providers.huggingface.endpoint_url,
                api_base=providers.huggingface.api_base,
                model=providers.huggingface.model,
                max_new_tokens=providers.huggingface.max_new_tokens,
                timeout=providers.huggingface.timeout,
            ),
            RuleBasedProvider(),
        ]

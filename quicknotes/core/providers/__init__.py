"""
Enrichment provider abstraction layer.

Supported providers (default priority order):
- DirectLlamaProvider (in-process transformers pipeline)
- OllamaProvider (self-hosted, ollama SDK)
- GroqProvider (hosted, OpenAI-compatible)
- OpenAIProvider (hosted, official SDK)
- HuggingFaceProvider (Inference API or self-hosted endpoint)
- RuleBasedProvider (deterministic, always available)
"""

from quicknotes.core.providers.base import EnrichmentProvider
from quicknotes.core.providers.chat_completion import (
    ChatCompletionProvider,
    GroqProvider,
    OpenAIProvider,
)
from quicknotes.core.providers.huggingface import HuggingFaceProvider
from quicknotes.core.providers.local_inference import DirectLlamaProvider
from quicknotes.core.providers.ollama import OllamaProvider
from quicknotes.core.providers.rule_based import RuleBasedProvider

__all__ = [
    "EnrichmentProvider",
    "ChatCompletionProvider",
    "DirectLlamaProvider",
    "OllamaProvider",
    "GroqProvider",
    "OpenAIProvider",
    "HuggingFaceProvider",
    "RuleBasedProvider",
]

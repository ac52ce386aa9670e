"""
Rule-based enrichment provider.

Deterministic, dependency-free and always available. Used as the last entry
in the provider chain and as the fallback when another provider fails.
"""

import re

from quicknotes.core.providers.base import EnrichmentProvider
from quicknotes.core.providers.parsing import MAX_TAGS, truncate_summary
from quicknotes.models.note import EnrichResult

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


class RuleBasedProvider(EnrichmentProvider):
    """
    Summary is the trimmed text cut to 100 characters; tags are the first
    distinct lowercase alphanumeric tokens.
    """

    name = "Rule-based"

    def is_available(self) -> bool:
        return True

    async def enrich(self, text: str) -> EnrichResult:
        if not isinstance(text, str):
            raise TypeError(f"Note text must be a string, got {type(text).__name__}")

        # Whitespace-only input has nothing to trim down to
        summary = truncate_summary(text) or text[:100]
        tokens = [token for token in _NON_ALNUM.split(text.strip().lower()) if token]
        tags = list(dict.fromkeys(tokens))[:MAX_TAGS]
        return EnrichResult(summary=summary, tags=tags)

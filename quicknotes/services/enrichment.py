"""
Enrichment façade - selects a provider and falls back deterministically.

Selection:
1. A preferred provider name (case-insensitive, substring either way) wins
   if the matching provider is available.
2. Otherwise the first available provider in priority order.
3. The deterministic provider is last and always available.

Invocation is a two-step plan: the selected provider, then the deterministic
provider exactly once if the first step failed.
"""

from typing import Any

from quicknotes.core.providers.base import EnrichmentProvider
from quicknotes.core.providers.rule_based import RuleBasedProvider
from quicknotes.models.note import EnrichResult
from quicknotes.utils.exceptions import ExhaustedFallback, ProviderError
from quicknotes.utils.logger import get_logger

logger = get_logger(__name__)


class Enricher:
    """
    Ordered provider chain with availability probing and one-shot fallback.

    Holds no per-call state; concurrent enrichments share only the provider
    instances.
    """

    def __init__(
        self,
        providers: list[EnrichmentProvider],
        fallback: EnrichmentProvider | None = None,
        preference: str | None = None,
    ):
        """
        Initialize enricher.

        Args:
            providers: Providers in priority order
            fallback: Deterministic provider (default: a RuleBasedProvider);
                appended to the chain if not already part of it
            preference: Default preferred provider name
        """
        self.providers = list(providers)
        self.fallback = fallback or next(
            (p for p in self.providers if p.name == RuleBasedProvider.name), RuleBasedProvider()
        )
        if self.fallback not in self.providers:
            self.providers.append(self.fallback)
        self.preference = preference

    def select_provider(self, preference: str | None = None) -> EnrichmentProvider:
        """
        Choose the provider for one enrichment call.

        Args:
            preference: Preferred provider name (default: the configured one)

        Returns:
            Selected provider (never None)
        """
        preference = preference if preference is not None else self.preference

        if preference and preference.strip():
            wanted = preference.strip().lower()
            match = next(
                (
                    p
                    for p in self.providers
                    if wanted in p.name.lower() or p.name.lower() in wanted
                ),
                None,
            )
            if match is not None and match.is_available():
                return match
            logger.info(f"Preferred provider '{preference}' unavailable, using priority order")

        return next((p for p in self.providers if p.is_available()), self.fallback)

    def fallback_plan(self, selected: EnrichmentProvider) -> list[EnrichmentProvider]:
        """
        Providers to try, in order, for a call that selected `selected`.

        Returns:
            [selected] for the deterministic provider, else [selected, fallback]
        """
        if selected is self.fallback:
            return [selected]
        return [selected, self.fallback]

    async def enrich(self, text: str, preference: str | None = None) -> EnrichResult:
        """
        Generate summary and tags for text.

        Never raises for non-empty string input.

        Args:
            text: Note text
            preference: Optional provider name hint for this call

        Returns:
            EnrichResult from the selected provider or the fallback

        Raises:
            ExhaustedFallback: If the deterministic provider also failed
        """
        plan = self.fallback_plan(self.select_provider(preference))

        last_error: Exception | None = None
        for provider in plan:
            if last_error is not None:
                logger.warning(f"Falling back to {provider.name} after: {last_error}")
            outcome = await self._attempt(provider, text)
            if isinstance(outcome, EnrichResult):
                return outcome
            last_error = outcome

        raise ExhaustedFallback(
            f"All enrichment attempts failed: {last_error}",
            context={"providers": [p.name for p in plan]},
        ) from last_error

    async def _attempt(self, provider: EnrichmentProvider, text: str) -> EnrichResult | Exception:
        logger.info(f"Using {provider.name} for AI enrichment")
        try:
            result = await provider.enrich(text)
        except Exception as e:
            logger.warning("{} failed: {}", provider.name, e)
            return e

        if provider is not self.fallback and not result.summary.strip():
            return ProviderError(
                f"{provider.name} returned an empty summary", context={"provider": provider.name}
            )
        return result

    def describe(self) -> list[dict[str, Any]]:
        """
        Report each provider's availability in priority order.

        Returns:
            List of {"name", "available"} dicts
        """
        return [{"name": p.name, "available": p.is_available()} for p in self.providers]

    async def close(self) -> None:
        """Close all providers."""
        for provider in self.providers:
            await provider.close()

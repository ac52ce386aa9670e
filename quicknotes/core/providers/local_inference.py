"""
In-process summarization provider using Hugging Face transformers.

The pipeline is expensive to build, so it is loaded on first use and cached
for the lifetime of the provider. Inference runs in a worker thread to keep
the event loop responsive.
"""

import asyncio
from collections.abc import Callable
from typing import Any

from quicknotes.core.providers.base import EnrichmentProvider
from quicknotes.core.providers.parsing import extract_keywords, truncate_summary
from quicknotes.models.note import EnrichResult
from quicknotes.utils.logger import get_logger

logger = get_logger(__name__)


def load_summarization_pipeline(model: str) -> Callable[..., Any]:
    """Build a transformers summarization pipeline (downloads the model on first run)."""
    from transformers import pipeline

    return pipeline("summarization", model=model)


class DirectLlamaProvider(EnrichmentProvider):
    """
    Local summarization with no external service.

    Summary comes from the pipeline, tags from keyword frequency. Any runtime
    failure (missing model, load error, inference error) switches to the
    keyword heuristic instead of raising.
    """

    name = "Direct Llama"

    def __init__(
        self,
        enabled: bool = False,
        model: str = "sshleifer/distilbart-cnn-6-6",
        max_length: int = 50,
        min_length: int = 10,
        pipeline_loader: Callable[[str], Callable[..., Any]] = load_summarization_pipeline,
    ):
        """
        Initialize local inference provider.

        Args:
            enabled: Local runtime flag (availability)
            model: Summarization model name
            max_length: Maximum summary length in tokens
            min_length: Minimum summary length in tokens
            pipeline_loader: Builds the pipeline for a model name
        """
        self.enabled = enabled
        self.model = model
        self.max_length = max_length
        self.min_length = min_length
        self.pipeline_loader = pipeline_loader

        self._summarizer: Callable[..., Any] | None = None
        self._loaded = False
        self._load_lock = asyncio.Lock()

    def is_available(self) -> bool:
        return self.enabled

    async def _get_summarizer(self) -> Callable[..., Any]:
        if self._loaded:
            return self._summarizer
        async with self._load_lock:
            if not self._loaded:
                logger.info(f"Loading summarization model {self.model} (first use may be slow)")
                self._summarizer = await asyncio.to_thread(self.pipeline_loader, self.model)
                self._loaded = True
        return self._summarizer

    async def enrich(self, text: str) -> EnrichResult:
        try:
            summarizer = await self._get_summarizer()
            output = await asyncio.to_thread(
                summarizer,
                text,
                max_length=self.max_length,
                min_length=self.min_length,
                do_sample=False,
            )
            summary = (output[0].get("summary_text") or "").strip() if output else ""
            return EnrichResult(
                summary=summary or truncate_summary(text),
                tags=extract_keywords(text),
            )
        except Exception as e:
            logger.warning("Local summarization failed, using keyword heuristic: {}", e)
            return self._keyword_enrich(text)

    def _keyword_enrich(self, text: str) -> EnrichResult:
        return EnrichResult(summary=truncate_summary(text), tags=extract_keywords(text))

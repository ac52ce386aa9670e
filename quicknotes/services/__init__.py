"""Services built on the storage and enrichment components."""

from quicknotes.services.enrichment import Enricher

__all__ = ["Enricher"]

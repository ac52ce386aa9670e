"""Core storage and enrichment components."""

"""Utility modules for QuickNotes."""

from quicknotes.utils.clock import MonotonicClock, utc_now
from quicknotes.utils.exceptions import (
    BackendUnavailable,
    ConfigurationError,
    ExhaustedFallback,
    NotFoundError,
    ProviderError,
    QuickNotesError,
    StoreError,
    ValidationError,
)
from quicknotes.utils.id_generator import generate_note_id
from quicknotes.utils.logger import get_logger, setup_logging

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # IDs and time
    "generate_note_id",
    "MonotonicClock",
    "utc_now",
    # Exceptions
    "QuickNotesError",
    "ValidationError",
    "NotFoundError",
    "ConfigurationError",
    "StoreError",
    "BackendUnavailable",
    "ProviderError",
    "ExhaustedFallback",
]

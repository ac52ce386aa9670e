"""
Custom exception hierarchy for QuickNotes.

Provides structured error types for better error handling and debugging.
All exceptions inherit from QuickNotesError for easy catching.
"""


class QuickNotesError(Exception):
    """
    Base exception for all QuickNotes errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize QuickNotes error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ValidationError(QuickNotesError):
    """
    Validation errors.
    Raised when required input is empty, missing or malformed.
    """

    pass


class NotFoundError(QuickNotesError):
    """
    Resource not found errors.
    Repositories report unknown ids as None; callers above the repository
    raise this to surface the condition explicitly.
    """

    pass


class ConfigurationError(QuickNotesError):
    """
    Configuration errors.
    Raised when configuration is invalid or names an unknown backend.
    """

    pass


class StoreError(QuickNotesError):
    """
    Base exception for store operations.
    Raised when a storage backend rejects or fails an operation.
    """

    pass


class BackendUnavailable(StoreError):
    """
    Storage connectivity errors.
    Raised when a backend cannot be reached or its schema cannot be initialized.
    """

    pass


class ProviderError(QuickNotesError):
    """
    Enrichment provider errors.
    Raised when a single provider fails (transport, HTTP status, unparseable
    payload). Recovered by the enrichment fallback.
    """

    pass


class ExhaustedFallback(QuickNotesError):
    """
    Raised when the deterministic fallback provider itself fails.
    Only reachable for malformed (e.g. non-string) input.
    """

    pass

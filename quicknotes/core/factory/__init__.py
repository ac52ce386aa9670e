"""
Factory classes for creating QuickNotes components from configuration.
"""

from quicknotes.core.factory.provider_factory import ProviderFactory
from quicknotes.core.factory.repository_factory import (
    RepositoryFactory,
    detect_restricted_environment,
)

__all__ = [
    "ProviderFactory",
    "RepositoryFactory",
    "detect_restricted_environment",
]

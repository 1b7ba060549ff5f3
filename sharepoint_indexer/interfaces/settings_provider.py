"""Abstract base class for secret / setting providers.

The pipeline needs a handful of named settings (the embedding deployment
name, the index identity, the default file URL).  They are read through
this contract so a deployment can back it with environment variables, a
YAML file, or a remote configuration store without touching the core.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementation: EnvSettingsProvider (sharepoint_indexer/providers/settings/)
class ISettingsProvider(ABC):
    """Contract for named-setting lookup, consumed before a pipeline run starts."""

    @abstractmethod
    async def get_setting(self, name: str) -> str:
        """Return the value of setting *name*.

        Parameters
        ----------
        name:
            Upper-case setting name, e.g. ``"AZURE_OPENAI_EMBEDDING_DEPLOYMENT"``.

        Raises
        ------
        sharepoint_indexer.utils.errors.ConfigurationError
            If the setting is missing or empty.
        """

    @abstractmethod
    async def get_optional_setting(self, name: str, default: str = "") -> str:
        """Return setting *name*, or *default* when it is missing or empty."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this settings provider."""

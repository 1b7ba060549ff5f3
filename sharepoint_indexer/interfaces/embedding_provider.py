"""Abstract base class for text-embedding service providers.

Defines the single call the pipeline makes against an embedding service:
one text in, one vector out, for a named model deployment.  Retry policy is
not the provider's concern; :class:`~sharepoint_indexer.services.embedder.Embedder`
wraps every call with bounded exponential backoff.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementation: OpenAIEmbeddingProvider (Azure OpenAI or OpenAI API)
class IEmbeddingProvider(ABC):
    """Contract for embedding generation used by the indexing pipeline."""

    @abstractmethod
    async def compute_embedding(self, deployment: str, text: str) -> list[float] | None:
        """Generate the embedding vector for *text*.

        Parameters
        ----------
        deployment:
            Model deployment (Azure) or model name (OpenAI) to call.
        text:
            The chunk text to embed.

        Returns
        -------
        list[float] | None
            The vector, or ``None`` / an empty list when the service returned
            no embedding.  Callers treat an empty result as a failure.

        Raises
        ------
        sharepoint_indexer.utils.errors.EmbeddingError
            If the API call fails.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"azure_openai_embedding"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if credentials for the provider are configured."""

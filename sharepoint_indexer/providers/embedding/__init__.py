"""Embedding provider implementations.

OpenAIEmbeddingProvider covers both Azure OpenAI deployments and the public
OpenAI API (or any OpenAI-compatible base URL); which one is used depends on
whether ``AZURE_OPENAI_ENDPOINT`` is set.
"""

from sharepoint_indexer.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider

__all__ = ["OpenAIEmbeddingProvider"]

"""Abstract contracts for every external collaborator of the pipeline.

The core (locator, extractor, chunker, embedder, synchronizer, orchestrator)
only ever sees these interfaces; concrete adapters in
``sharepoint_indexer/providers/`` are chosen and injected in ``pipeline/factory.py``.

    Interface              →  Concrete implementations
    ──────────────────────────────────────────────────────────
    IDocumentSource        →  GraphDocumentSource
    IEmbeddingProvider     →  OpenAIEmbeddingProvider
    ISearchIndexProvider   →  AzureSearchIndexProvider, ChromaDBIndexProvider
    ISettingsProvider      →  EnvSettingsProvider
"""

from sharepoint_indexer.interfaces.document_source import IDocumentSource
from sharepoint_indexer.interfaces.embedding_provider import IEmbeddingProvider
from sharepoint_indexer.interfaces.search_index_provider import ISearchIndexProvider
from sharepoint_indexer.interfaces.settings_provider import ISettingsProvider

__all__ = [
    "IDocumentSource",
    "IEmbeddingProvider",
    "ISearchIndexProvider",
    "ISettingsProvider",
]

"""Abstract base class for search-index providers.

The Index Synchronizer needs three primitives from the index: find the keys
of documents matching a filter, delete documents by key, and upsert a batch
reporting a per-document outcome.  Implementations wrap Azure AI Search
(REST) or a local ChromaDB collection.

**Filter syntax** accepted by :meth:`query_ids` is the OData subset the
synchronizer emits: ``<field> eq '<value>'`` with single quotes inside the
value doubled.  Providers that are not OData-native translate that form.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from sharepoint_indexer.models.index import IndexDocument, IndexingOutcome


# Concrete implementations: AzureSearchIndexProvider, ChromaDBIndexProvider
class ISearchIndexProvider(ABC):
    """Contract for index mutation used by the Index Synchronizer."""

    @abstractmethod
    async def query_ids(self, filter_expression: str) -> list[str]:
        """Return the keys (``docId``) of every document matching *filter_expression*."""

    @abstractmethod
    async def delete_by_ids(self, ids: list[str]) -> int:
        """Delete the documents with the given keys and return how many were removed."""

    @abstractmethod
    async def upsert(self, documents: list[IndexDocument]) -> list[IndexingOutcome]:
        """Insert or replace *documents*, returning one outcome per document in order."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"azure_search"``."""

"""Search-index provider implementations.

Two implementations of ISearchIndexProvider, selected by ``SEARCH_BACKEND``:
    azure     AzureSearchIndexProvider (Azure AI Search REST API)
    chromadb  ChromaDBIndexProvider (local persistent collection)

ChromaDBIndexProvider is imported directly where needed so that importing
this package does not pull in chromadb.
"""

from sharepoint_indexer.providers.search_index.azure_search_provider import AzureSearchIndexProvider

__all__ = ["AzureSearchIndexProvider"]

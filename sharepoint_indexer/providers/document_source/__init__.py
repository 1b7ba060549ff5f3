from sharepoint_indexer.providers.document_source.graph_provider import GraphDocumentSource

__all__ = ["GraphDocumentSource"]
